"""Configuration commands: where records go and which color theme to use."""

from __future__ import annotations

import typer

from . import config, config_manager
from .display import detect_color_theme

config_app = typer.Typer(
    help="⚙️  Configuration: record endpoint and color theme.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def print_success(message: str):
    typer.echo(typer.style(f"✓ {message}", fg=typer.colors.GREEN))


def print_error(message: str):
    typer.echo(typer.style(f"✗ {message}", fg=typer.colors.RED), err=True)


@config_app.command("show")
def show_config():
    """Show the current configuration."""
    settings = config_manager.load_settings()
    endpoint = settings.records_endpoint or f"(local file) {config.RECORDS_FILE}"
    typer.echo(f"  Config      {config.CONFIG_FILE}")
    typer.echo(f"  Records     {endpoint}")
    typer.echo(f"  Theme       {settings.color_theme} ({detect_color_theme(settings.color_theme)})")
    typer.echo(f"  Reminder    after {settings.inactivity_seconds:g}s idle")
    typer.echo(f"  Dismiss     after {settings.dismiss_seconds:g}s")


@config_app.command("set-endpoint")
def set_endpoint(
    endpoint: str = typer.Argument("", help="HTTP endpoint for records; empty to use the local file."),
):
    """Send thanks records to an HTTP endpoint instead of the local file."""
    if endpoint and not endpoint.startswith(("http://", "https://")):
        raise typer.BadParameter("Endpoint must start with http:// or https://")
    if not config_manager.save_records_endpoint(endpoint):
        print_error("Failed to save configuration!")
        raise typer.Exit(code=1)
    print_success(f"Records endpoint set to: {endpoint or 'local file'}")


@config_app.command("set-theme")
def set_theme(theme_name: str = typer.Argument(..., help="Color theme name, e.g. 'Default Light Modern'.")):
    """Set the color theme used to pick gutter icons."""
    if not config_manager.save_color_theme(theme_name):
        print_error("Failed to save configuration!")
        raise typer.Exit(code=1)
    print_success(f"Color theme set to: {theme_name} ({detect_color_theme(theme_name)})")
