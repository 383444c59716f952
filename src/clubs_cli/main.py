import typer

from pathlib import Path
from typing import Optional

from clubs import pipeline
from clubs.client import ActionResult
from clubs.context import Context
from clubs.errors import ClubsError
from clubs.logs import setup_logging
from clubs.render import ListView

from clubs_cli import browse, settings
from clubs_cli.output import create_formatter
from clubs_cli.ui import FuzzyItem, fuzzy_select

cli = typer.Typer(help="Browse school activities and manage signups.")

cli.add_typer(settings.app, name="config")
cli.add_typer(browse.app, name="browse")

SORT_HELP = "Sort by 'name' or 'time'; anything else keeps server order."


@cli.callback()
def main(ctx: typer.Context,
         url: Optional[str] = typer.Option(None, "--url", help="Base URL of the activities API."),
         config_path: Optional[Path] = typer.Option(None, "--config", help="Path to config.toml."),
         verbose: bool = typer.Option(False, "--verbose", "-v", help="Show informational log messages."),
         log_file: Optional[Path] = typer.Option(None, "--log-file", help="Write a debug log to this file.")):
    # The browser owns the terminal, so its logs only go to file.
    setup_logging(log_file=log_file, verbose=verbose,
                  console=ctx.invoked_subcommand != "browse")
    ctx.obj = Context(config_path=config_path, base_url=url)


@cli.command(name="list") # To avoid conflict with list type
def list_activities(
    ctx: typer.Context,
    search: str = typer.Option("", "--search", "-s", help="Case-insensitive text to find in name or description."),
    category: str = typer.Option("", "--category", "-c", help="Only show this category."),
    sort: str = typer.Option("", "--sort", help=SORT_HELP),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    plain_output: bool = typer.Option(False, "--plain", help="Output as plain text (no colors)"),
):
    """
    cli: clubs list
    Fetch all activities and show the ones matching the filters.

    Examples:
        clubs list
        clubs list --category Sports --sort time
        clubs list -s chess --json
    """
    try:
        controller = ctx.obj.controller
        formatter = create_formatter(json_output, plain_output)

        controller.state.search = search
        controller.state.sort = sort
        loaded = controller.load_activities()
        if loaded and category:
            controller.set_filters(category=category)

        formatter.print_view(controller.view)
        if not loaded:
            raise typer.Exit(1)
    except ClubsError as e:
        typer.echo(f"Error listing activities: {e}", err=True)
        raise typer.Exit(1)


@cli.command()
def categories(ctx: typer.Context,
               json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
               plain_output: bool = typer.Option(False, "--plain", help="Output as plain text (no colors)")):
    """
    cli: clubs categories
    List the categories present in the current activities, in server order.
    """
    try:
        controller = ctx.obj.controller
        formatter = create_formatter(json_output, plain_output)

        if not controller.load_activities():
            formatter.print_view(controller.view)
            raise typer.Exit(1)

        formatter.print_categories(pipeline.categories(controller.state.store))
    except ClubsError as e:
        typer.echo(f"Error listing categories: {e}", err=True)
        raise typer.Exit(1)


def choose_activity(controller) -> Optional[str]:
    """
    Let the user pick from the activity selector as it stands after filtering.
    """
    choices = [
        FuzzyItem(name=card.name, value=card.name, decoration=card.availability)
        for card in controller.view.cards
    ]
    if not choices:
        return None
    selected = fuzzy_select("Which activity?", choices)
    return selected.value if selected else None


def report(controller, result: Optional[ActionResult], activity: str, json_output: bool) -> None:
    formatter = create_formatter(json_output, False)
    # Success comes from the result; the visible message may already have expired.
    message = controller.messages.last
    if message is not None:
        formatter.print_message(message)
    if result is None or not result.ok:
        raise typer.Exit(1)

    if not json_output:
        # The store was re-fetched after the change; show the fresh roster.
        for card in controller.view.cards:
            if card.name == activity:
                formatter.print_view(ListView(cards=[card]))


@cli.command()
def signup(
    ctx: typer.Context,
    email: str = typer.Argument(..., help="Email address of the student."),
    activity: Optional[str] = typer.Argument(None, help="Activity name; pick interactively if omitted."),
    search: str = typer.Option("", "--search", "-s", help="Narrow the interactive picker."),
    category: str = typer.Option("", "--category", "-c", help="Narrow the interactive picker."),
    sort: str = typer.Option("", "--sort", help=SORT_HELP),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    cli: clubs signup
    Sign a student up for an activity.
    """
    try:
        controller = ctx.obj.controller

        if not activity:
            controller.state.search = search
            controller.state.sort = sort
            if not controller.load_activities():
                create_formatter(json_output, False).print_view(controller.view)
                raise typer.Exit(1)
            if category:
                controller.set_filters(category=category)
            activity = choose_activity(controller)
            if not activity:
                typer.echo("No activity selected.", err=True)
                raise typer.Exit(1)

        controller.state.form.email = email
        controller.state.form.activity = activity
        result = controller.signup(email, activity)
        report(controller, result, activity, json_output)
    except ClubsError as e:
        typer.echo(f"Error signing up: {e}", err=True)
        raise typer.Exit(1)


@cli.command()
def unregister(
    ctx: typer.Context,
    activity: str = typer.Argument(..., help="Activity name."),
    email: str = typer.Argument(..., help="Email address to remove."),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    cli: clubs unregister
    Remove a student from an activity.
    """
    try:
        controller = ctx.obj.controller
        result = controller.unregister(activity, email)
        report(controller, result, activity, json_output)
    except ClubsError as e:
        typer.echo(f"Error unregistering: {e}", err=True)
        raise typer.Exit(1)
