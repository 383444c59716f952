import typer

from rich.console import Console

from clubs.config import Config
from clubs.errors import ClubsError
from clubs_cli.utils import edit_file

app = typer.Typer(help="Show and edit the clubs configuration.")

"""
clubs config show
clubs config init
clubs config edit
"""

@app.command()
def show(ctx: typer.Context):
    """
    cli: clubs config show
    Print the effective configuration, after environment and --url overrides.
    """
    try:
        config: Config = ctx.obj.config
    except ClubsError as e:
        typer.echo(f"Error reading configuration: {e}", err=True)
        raise typer.Exit(1)

    console = Console()
    console.print(f"[bold]Config file:[/bold] {ctx.obj.config_path}"
                  f"{'' if ctx.obj.config_path.exists() else ' [dim](not created)[/dim]'}")
    console.print(f"[bold]API:[/bold] {config.base_url}")
    console.print(f"[bold]Messages hide after:[/bold] {config.message_timeout:g}s")
    if config.request_timeout is None:
        console.print("[bold]Request timeout:[/bold] [dim]none[/dim]")
    else:
        console.print(f"[bold]Request timeout:[/bold] {config.request_timeout:g}s")
    for control in ("search", "category", "sort"):
        enabled = getattr(config, f"show_{control}")
        console.print(f"[bold]{control.capitalize()} control:[/bold] {'on' if enabled else 'off'}")

@app.command()
def init(ctx: typer.Context,
         force: bool = typer.Option(False, "--force", help="Overwrite an existing config file")):
    """
    cli: clubs config init
    Write a config file holding the default settings.
    """
    path = ctx.obj.config_path
    if path.exists() and not force:
        typer.echo(f"Config file {path} already exists. Use --force to overwrite it.")
        raise typer.Exit(1)

    Config().write(path)
    typer.echo(f"Wrote default configuration to {path}.")

@app.command()
def edit(ctx: typer.Context):
    """
    cli: clubs config edit
    Edit the clubs configuration in your preferred editor.
    """
    path = ctx.obj.config_path
    if not path.exists():
        Config().write(path)

    if edit_file(path):
        typer.echo("Configuration file was updated.")
    else:
        typer.echo("No changes detected.")
