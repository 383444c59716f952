import json
import typer

from typing import List, Optional

from rich.console import Console, Group
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

from clubs.messages import Message, SUCCESS
from clubs.render import ActivityCard, ListView


def card_to_dict(card: ActivityCard) -> dict:
    return {
        "name": card.name,
        "description": card.description,
        "schedule": card.schedule,
        "category": card.category,
        "spots_left": card.spots_left,
        "participants": [row.email for row in card.participants],
    }


class RichFormatter:
    """Cards as rich panels."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def card_renderable(self, card: ActivityCard) -> Panel:
        lines = [
            Text(card.description),
            Text.assemble(("Schedule: ", "bold"), card.schedule),
            Text.assemble(("Category: ", "bold"), card.category),
            Text.assemble(("Availability: ", "bold"), card.availability),
        ]
        if card.participants:
            lines.append(Text("Participants:", style="bold"))
            for row in card.participants:
                lines.append(Text.assemble("  ", (row.email, "cyan")))
        else:
            lines.append(Text(card.participants_notice, style="italic dim"))
        return Panel(Group(*lines), title=f"[bold]{escape(card.name)}[/bold]", title_align="left")

    def print_view(self, view: ListView) -> None:
        if view.empty_notice:
            self.console.print(f"[yellow]{escape(view.empty_notice)}[/yellow]")
            return
        for card in view.cards:
            self.console.print(self.card_renderable(card))
        self.console.print(f"[dim]{len(view.cards)} activities[/dim]")

    def print_categories(self, categories: List[str]) -> None:
        if not categories:
            self.console.print("[yellow]No categories found.[/yellow]")
        for category in categories:
            self.console.print(f"- [cyan]{escape(category)}[/cyan]")

    def print_message(self, message: Message) -> None:
        style = "green" if message.kind == SUCCESS else "red"
        self.console.print(f"[{style}]{escape(message.text)}[/{style}]")


class PlainFormatter(RichFormatter):
    """Same layout, no colours or boxes."""

    def __init__(self):
        super().__init__(Console(no_color=True, highlight=False))

    def print_view(self, view: ListView) -> None:
        if view.empty_notice:
            typer.echo(view.empty_notice)
            return
        for card in view.cards:
            typer.echo(card.name)
            typer.echo(f"  {card.description}")
            typer.echo(f"  Schedule: {card.schedule}")
            typer.echo(f"  Category: {card.category}")
            typer.echo(f"  Availability: {card.availability}")
            if card.participants:
                typer.echo("  Participants:")
                for row in card.participants:
                    typer.echo(f"    - {row.email}")
            else:
                typer.echo(f"  {card.participants_notice}")

    def print_categories(self, categories: List[str]) -> None:
        for category in categories:
            typer.echo(category)

    def print_message(self, message: Message) -> None:
        typer.echo(message.text, err=message.kind != SUCCESS)


class JsonFormatter(PlainFormatter):

    def print_view(self, view: ListView) -> None:
        typer.echo(json.dumps([card_to_dict(card) for card in view.cards], indent=2))
        if view.empty_notice:
            typer.echo(view.empty_notice, err=True)

    def print_categories(self, categories: List[str]) -> None:
        typer.echo(json.dumps(categories, indent=2))

    def print_message(self, message: Message) -> None:
        typer.echo(json.dumps({"kind": message.kind, "message": message.text}))


def create_formatter(json_output: bool = False, plain_output: bool = False) -> RichFormatter:
    if json_output:
        return JsonFormatter()
    if plain_output:
        return PlainFormatter()
    return RichFormatter()
