from prompt_toolkit import Application
from prompt_toolkit.buffer import Buffer
from prompt_toolkit.layout import Layout, HSplit, Window, VSplit
from prompt_toolkit.layout.dimension import Dimension
from prompt_toolkit.layout.controls import BufferControl, FormattedTextControl
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.styles import Style
from prompt_toolkit.shortcuts import print_formatted_text
from prompt_toolkit.formatted_text import HTML

from typing import Union, Any, List, Optional
from dataclasses import dataclass

from pfzy import fzy_scorer

style = Style.from_dict({
    "selector": "fg:ansigray",
    "match":    "fg:ansimagenta bold",
    "select":   "fg:ansiblue",
    "decoration": "fg:ansigreen",
})

@dataclass
class FuzzyItem:
    name: str
    value: Any
    decoration: Optional[str] = None

def normalize_to_fuzzyitems(items: list[Any]) -> list[FuzzyItem]:
    normalized = []
    for i in items:
        if isinstance(i, FuzzyItem):
            normalized.append(i)
        elif isinstance(i, str):
            normalized.append(FuzzyItem(name=i, value=i))
        else:
            raise TypeError("Expected list of str or FuzzyItem instances")
    return normalized

def rank(query: str, choices: List[FuzzyItem]) -> List[tuple]:
    """
    Score every choice against the query, best first.
    Returns (item, indices of matched characters) pairs; an empty query keeps everything in order.
    """
    if not query.strip():
        return [(c, []) for c in choices]

    scored = []
    for cand in choices:
        score, idxs = fzy_scorer(query, cand.name)
        if score > 0:
            scored.append((cand, score, idxs))
    scored.sort(key=lambda x: x[1], reverse=True)
    return [(c, idxs) for c, _, idxs in scored]

def fuzzy_select(prompt: str,
                 choices: list[Union[str, FuzzyItem]],
                 max_fraction: float = 0.5,
                 escapable: bool = True) -> Optional[FuzzyItem]:

    import shutil
    total = shutil.get_terminal_size().lines
    max_rows = max(3, int(total * max_fraction))

    choices = normalize_to_fuzzyitems(choices)

    matches       = rank("", choices)
    selected_idx  = 0
    offset        = 0

    kb = KeyBindings()

    @kb.add("up")
    def _(event):
        nonlocal selected_idx, offset
        selected_idx = max(0, selected_idx - 1)
        if selected_idx < offset:
            offset = selected_idx

    @kb.add("down")
    def _(event):
        nonlocal selected_idx, offset
        selected_idx = min(len(matches) - 1, selected_idx + 1)
        if selected_idx >= offset + max_rows:
            offset = selected_idx - max_rows + 1

    @kb.add("enter")
    def _(event):
        if selected_idx < len(matches):
            event.app.exit(result=matches[selected_idx][0])
        else:
            event.app.exit(result=None)

    @kb.add("escape", eager=True)
    def _(event):
        if escapable:
            event.app.exit(result=None)

    @kb.add("c-c")
    def _(event):
        raise KeyboardInterrupt()

    buf = Buffer()

    def on_change(_):
        nonlocal matches, selected_idx, offset
        matches = rank(buf.text, choices)
        selected_idx = 0
        offset = 0

    buf.on_text_changed += on_change

    def get_menu_tokens():
        tokens = []
        visible = matches[offset: offset + max_rows]
        for i, (m, idxs) in enumerate(visible):
            is_sel = (offset + i == selected_idx)

            tokens.append(("class:selector", "❯ " if is_sel else "  "))

            name = m.name
            last = 0
            for pos in idxs:
                if pos > last:
                    tag = "class:select" if is_sel else ""
                    tokens.append((tag, name[last:pos]))
                tokens.append(("class:match", name[pos]))
                last = pos + 1
            if last < len(name):
                tag = "class:select" if is_sel else ""
                tokens.append((tag, name[last:]))

            if m.decoration:
                tokens.append(("class:decoration", f" {m.decoration}"))
            tokens.append(('', "\n"))

        return tokens

    prompt_win = Window(height=1, content=FormattedTextControl('? ' + prompt))
    input_row = VSplit([
        Window(width=2, content=FormattedTextControl("❯ ")),
        Window(height=1, content=BufferControl(buffer=buf)),
    ])
    menu_win = Window(content=FormattedTextControl(get_menu_tokens),
                      wrap_lines=False,
                      height=Dimension(max=max_rows))

    root = HSplit([prompt_win, input_row, menu_win])
    app = Application(layout=Layout(root),
                      key_bindings=kb,
                      style=style,
                      full_screen=False,
                      erase_when_done=True)

    app.ttimeoutlen = 0.0001
    app.timeoutlen = None

    selection = app.run()

    label = selection.name if selection else "(none)"
    print_formatted_text(HTML("? {} <ansiblue>{}</ansiblue>").format(prompt, label))

    return selection
