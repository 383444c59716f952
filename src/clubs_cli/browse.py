import asyncio
import typer

from prompt_toolkit import Application
from prompt_toolkit.buffer import Buffer
from prompt_toolkit.data_structures import Point
from prompt_toolkit.filters import has_focus
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.key_binding.bindings.focus import focus_next, focus_previous
from prompt_toolkit.layout import Layout, HSplit, VSplit, Window
from prompt_toolkit.layout.controls import BufferControl, FormattedTextControl
from prompt_toolkit.styles import Style

from typing import List, Optional, Union

from clubs.config import Config
from clubs.client import ActionResult
from clubs.controller import SIGNUP_FAILED, UNREGISTER_FAILED, ActivitiesController
from clubs.errors import ClubsError, TransportError
from clubs.messages import SUCCESS
from clubs.pipeline import SORT_MODES
from clubs.render import ActivityCard, ParticipantRow, SELECT_PLACEHOLDER

app = typer.Typer(help="Browse activities interactively.")

SORT_CYCLE = [""] + list(SORT_MODES)
SORT_LABELS = {"": "none", "name": "name", "time": "time"}

style = Style.from_dict({
    "label":       "bold",
    "card-name":   "bold fg:ansicyan",
    "cursor":      "reverse",
    "participant": "fg:ansiblue",
    "notice":      "italic fg:ansigray",
    "success":     "fg:ansiwhite bg:ansigreen",
    "error":       "fg:ansiwhite bg:ansired",
    "help":        "fg:ansigray",
})

Selectable = Union[ActivityCard, ParticipantRow]


class ActivityBrowser:
    """
    Full-screen activity browser.

    Everything on screen is drawn from controller.view, which is rebuilt from
    scratch on each render; the cursor and the delete action are resolved
    against the current view at key-press time.
    """

    def __init__(self, controller: ActivitiesController, config: Config):
        self.controller = controller
        self.config = config
        self.selected = 0
        self.cursor_line = 0
        self.app: Optional[Application] = None

        # Enter must not clear the fields.
        keep_text = lambda buffer: True
        self.search_buffer = Buffer(multiline=False, accept_handler=keep_text) if config.show_search else None
        if self.search_buffer is not None:
            self.search_buffer.on_text_changed += self.on_search_changed
        self.email_buffer = Buffer(multiline=False, accept_handler=keep_text)

        controller.on_render(lambda view: self.invalidate())

    # -- state helpers --------------------------------------------------

    def selectables(self) -> List[Selectable]:
        items: List[Selectable] = []
        for card in self.controller.view.cards:
            items.append(card)
            items.extend(card.participants)
        return items

    def current(self) -> Optional[Selectable]:
        items = self.selectables()
        if not items:
            return None
        self.selected = max(0, min(self.selected, len(items) - 1))
        return items[self.selected]

    def selected_row(self) -> Optional[ParticipantRow]:
        item = self.current()
        return item if isinstance(item, ParticipantRow) else None

    def move(self, step: int) -> None:
        self.selected = max(0, min(self.selected + step, len(self.selectables()) - 1))

    def form_activity(self) -> str:
        """The selector value; an activity hidden by the filters reads as unselected."""
        activity = self.controller.state.form.activity
        if activity in [value for value, _ in self.controller.view.selector_options[1:]]:
            return activity
        return ""

    def cycle_activity(self, step: int = 1) -> str:
        values = [value for value, _ in self.controller.view.selector_options]
        index = values.index(self.form_activity())
        self.controller.state.form.activity = values[(index + step) % len(values)]
        return self.controller.state.form.activity

    def cycle_category(self) -> str:
        values = [value for value, _ in self.controller.category_options]
        current = self.controller.state.category
        index = values.index(current) if current in values else 0
        category = values[(index + 1) % len(values)]
        self.controller.set_filters(category=category)
        return category

    def cycle_sort(self) -> str:
        current = self.controller.state.sort
        index = SORT_CYCLE.index(current) if current in SORT_CYCLE else 0
        sort = SORT_CYCLE[(index + 1) % len(SORT_CYCLE)]
        self.controller.set_filters(sort=sort)
        return sort

    def on_search_changed(self, buffer: Buffer) -> None:
        self.controller.set_filters(search=buffer.text)

    # -- drawing ----------------------------------------------------------

    def list_tokens(self):
        view = self.controller.view
        if view.empty_notice:
            return [("class:notice", view.empty_notice)]

        current = self.current()
        tokens = []
        self.cursor_line = 0
        line = 0

        def emit(parts, item=None):
            nonlocal line
            if item is not None and item is current:
                self.cursor_line = line
                parts = [("class:cursor " + s, t) for s, t in parts]
            tokens.extend(parts)
            tokens.append(("", "\n"))
            line += 1

        for card in view.cards:
            emit([("class:card-name", card.name)], card)
            emit([("", f"  {card.description}")])
            emit([("class:label", "  Schedule: "), ("", card.schedule)])
            emit([("class:label", "  Category: "), ("", card.category)])
            emit([("class:label", "  Availability: "), ("", card.availability)])
            if card.participants:
                emit([("class:label", "  Participants:")])
                for row in card.participants:
                    emit([("", "    ✕ "), ("class:participant", row.email)], row)
            else:
                emit([("class:notice", f"  {card.participants_notice}")])
            emit([])
        return tokens

    def filter_tokens(self):
        tokens = []
        if self.config.show_category:
            category = self.controller.state.category or "All Categories"
            tokens += [("class:label", "  Category: "), ("", category)]
        if self.config.show_sort:
            sort = SORT_LABELS.get(self.controller.state.sort, "none")
            tokens += [("class:label", "  Sort: "), ("", sort)]
        return tokens

    def selector_tokens(self):
        activity = self.form_activity()
        label = activity or SELECT_PLACEHOLDER[1]
        return [("class:label", "Activity: "), ("", f"< {label} >")]

    def message_tokens(self):
        message = self.controller.messages.current
        if message is None:
            return []
        kind = "class:success" if message.kind == SUCCESS else "class:error"
        return [(kind, f" {message.text} ")]

    def help_tokens(self):
        keys = ["tab focus", "enter choose/submit", "x unregister", "c-n/c-p activity", "c-r refresh"]
        if self.config.show_category:
            keys.append("c-t category")
        if self.config.show_sort:
            keys.append("c-o sort")
        keys.append("c-q quit")
        return [("class:help", "  ".join(keys))]

    # -- actions ----------------------------------------------------------

    def invalidate(self) -> None:
        if self.app is not None:
            self.app.invalidate()

    def spawn(self, coroutine) -> None:
        self.app.create_background_task(coroutine)

    async def blocking(self, fn, *args):
        # Only the HTTP call leaves the event loop; state is updated back here.
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, fn, *args)

    async def load(self) -> bool:
        try:
            store = await self.blocking(self.controller.client.get_activities)
        except TransportError as e:
            return self.controller.load_failed(e)
        return self.controller.apply_store(store)

    def refresh(self) -> None:
        self.spawn(self.load())

    def submit_signup(self) -> None:
        email = self.email_buffer.text.strip()
        activity = self.form_activity()
        if not email or not activity:
            self.controller.messages.error("Please enter an email and select an activity.")
            self.invalidate()
            return
        self.controller.state.form.email = email
        self.spawn(self.signup(email, activity))

    async def signup(self, email: str, activity: str) -> Optional[ActionResult]:
        try:
            result = await self.blocking(self.controller.client.signup, activity, email)
        except TransportError as e:
            self.controller.action_failed("signing up", e, SIGNUP_FAILED)
            self.invalidate()
            return None

        if self.controller.apply_action(result, reset_form=True):
            self.email_buffer.reset()
            await self.load()
        self.invalidate()
        return result

    def unregister_selected(self) -> None:
        row = self.selected_row()
        if row is None:
            return
        self.spawn(self.unregister(row.activity, row.email))

    async def unregister(self, activity: str, email: str) -> Optional[ActionResult]:
        try:
            result = await self.blocking(self.controller.client.unregister, activity, email)
        except TransportError as e:
            self.controller.action_failed("unregistering", e, UNREGISTER_FAILED)
            self.invalidate()
            return None

        if self.controller.apply_action(result):
            await self.load()
        self.invalidate()
        return result

    def choose_selected(self) -> None:
        item = self.current()
        if isinstance(item, ParticipantRow):
            self.controller.state.form.activity = item.activity
        elif item is not None:
            self.controller.state.form.activity = item.name
        if self.app is not None:
            self.app.layout.focus(self.email_buffer)

    # -- application ------------------------------------------------------

    def key_bindings(self, list_control) -> KeyBindings:
        kb = KeyBindings()
        in_list = has_focus(list_control)
        in_email = has_focus(self.email_buffer)

        kb.add("tab")(focus_next)
        kb.add("s-tab")(focus_previous)

        @kb.add("c-c")
        @kb.add("c-q")
        def _(event):
            event.app.exit()

        @kb.add("c-r")
        def _(event):
            self.refresh()

        if self.config.show_category:
            @kb.add("c-t")
            def _(event):
                self.cycle_category()

        if self.config.show_sort:
            @kb.add("c-o")
            def _(event):
                self.cycle_sort()

        @kb.add("up", filter=in_list)
        @kb.add("k", filter=in_list)
        def _(event):
            self.move(-1)

        @kb.add("down", filter=in_list)
        @kb.add("j", filter=in_list)
        def _(event):
            self.move(1)

        @kb.add("x", filter=in_list)
        @kb.add("delete", filter=in_list)
        def _(event):
            self.unregister_selected()

        @kb.add("enter", filter=in_list)
        def _(event):
            self.choose_selected()

        @kb.add("enter", filter=in_email)
        def _(event):
            self.submit_signup()

        @kb.add("c-n")
        def _(event):
            self.cycle_activity(1)

        @kb.add("c-p")
        def _(event):
            self.cycle_activity(-1)

        return kb

    def build_application(self) -> Application:
        list_control = FormattedTextControl(
            self.list_tokens,
            focusable=True,
            get_cursor_position=lambda: Point(0, self.cursor_line),
        )

        rows = []
        toolbar = []
        if self.search_buffer is not None:
            toolbar += [
                Window(width=8, content=FormattedTextControl([("class:label", "Search: ")])),
                Window(height=1, content=BufferControl(buffer=self.search_buffer)),
            ]
        toolbar.append(Window(height=1, content=FormattedTextControl(self.filter_tokens)))
        rows.append(VSplit(toolbar))
        rows.append(Window(height=1, char="─"))
        rows.append(Window(content=list_control, wrap_lines=True))
        rows.append(Window(height=1, char="─"))
        rows.append(VSplit([
            Window(width=7, content=FormattedTextControl([("class:label", "Email: ")])),
            Window(height=1, content=BufferControl(buffer=self.email_buffer)),
        ]))
        rows.append(Window(height=1, content=FormattedTextControl(self.selector_tokens)))
        rows.append(Window(height=1, content=FormattedTextControl(self.message_tokens)))
        rows.append(Window(height=1, content=FormattedTextControl(self.help_tokens)))

        self.app = Application(
            layout=Layout(HSplit(rows), focused_element=list_control),
            key_bindings=self.key_bindings(list_control),
            style=style,
            full_screen=True,
            # Lets an expired message disappear without a key press.
            refresh_interval=0.5,
        )
        return self.app

    def run(self) -> None:
        application = self.build_application()
        application.run(pre_run=self.refresh)


@app.callback(invoke_without_command=True)
def browse(ctx: typer.Context):
    """
    cli: clubs browse
    Open the interactive activity browser.
    """
    try:
        context = ctx.obj
        ActivityBrowser(context.controller, context.config).run()
    except ClubsError as e:
        typer.echo(f"Error starting browser: {e}", err=True)
        raise typer.Exit(1)
