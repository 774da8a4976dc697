"""Command-line interface for captions_please."""

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from captions_please import __version__
from captions_please.core.command import parse_command
from captions_please.core.splitter import split_message
from captions_please.core.tweet_text import MAX_WEIGHTED_LENGTH, weighted_length
from captions_please.exceptions import CaptionsError

app = typer.Typer(
    name="captions_please",
    help="Developer tools for the captions bot",
    add_completion=False,
)
console = Console()


def version_callback(value: bool):
    if value:
        console.print(f"captions_please version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
):
    """captions_please - image description bot tools."""
    pass


@app.command()
def parse(
    text: str = typer.Argument(..., help="Command text that follows the bot mention"),
):
    """Show the directive a command parses to."""
    directive = parse_command(text)

    table = Table(title=escape(f"\"{text}\""), show_header=False)
    table.add_column("Field", style="dim")
    table.add_column("Value")

    table.add_row("Directive", directive.label)
    table.add_row("Language", directive.language)
    for action in ("help", "auto", "alt_text", "ocr", "describe"):
        table.add_row(action, "✓" if getattr(directive, action) else "✗")

    console.print(table)


@app.command()
def split(
    text: str = typer.Argument(..., help="Reply text to split into posts"),
):
    """Show how a reply would be split into a chain of posts."""
    try:
        chunks = split_message(text)
    except CaptionsError as e:
        console.print(f"[red]✗[/red] {escape(str(e))}")
        raise typer.Exit(1)

    for number, chunk in enumerate(chunks, start=1):
        length = weighted_length(chunk)
        console.print(f"[bold]{number}[/bold] [dim]({length}/{MAX_WEIGHTED_LENGTH})[/dim] {escape(chunk)}")

    console.print(f"\n[bold]{len(chunks)} post{'s' if len(chunks) != 1 else ''}[/bold]")


if __name__ == "__main__":
    app()
