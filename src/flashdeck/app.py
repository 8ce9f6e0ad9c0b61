"""Command-line entry point."""
import sys
from pathlib import Path
from typing import Optional

import click
import typer
from loguru import logger
from rich.console import Console
from rich.markup import escape

from flashdeck.codec import load_flash_file, new_flash_file, save_flash_file
from flashdeck.config import Settings, configure_logging, get_settings
from flashdeck.files import SelectionError, ensure_extension, find_flash_files, find_single_flash_file
from flashdeck.models import Flashcard, FlashFile, SessionResult
from flashdeck.presenter import Presenter, RichPresenter
from flashdeck.scores import format_trend, previous_scores, score_percentages
from flashdeck.session import full_review, review_wrong_cards

COMMANDS = ("new", "add", "review", "study")

USAGE = """Usage:
  Review all cards: flash file.flsh
  Review wrong cards: flash review file.flsh
  Add card: flash add file.flsh
  Create new file: flash new <name>"""

app = typer.Typer(
    name="flash",
    help="Study plain-text flashcard files in the terminal.",
    add_completion=False,
)

console = Console()


def make_presenter(settings: Settings) -> Presenter:
    return RichPresenter(settings)


def _fail(message: str, usage: Optional[str] = None) -> None:
    if usage:
        console.print(usage, highlight=False)
    console.print(f"[red]Error: {escape(message)}[/red]")
    raise typer.Exit(code=1)


def _resolve_file(file: Optional[str], settings: Settings, usage: str) -> Path:
    if file:
        return Path(file)
    try:
        return find_single_flash_file(settings.directory, settings.extension)
    except SelectionError as e:
        logger.debug("File selection failed: {}", e)
        _fail(str(e), usage)


def _load(path: Path) -> FlashFile:
    try:
        return load_flash_file(path)
    except OSError as e:
        logger.error("Error reading {}: {}", path, e)
        _fail(f"error reading {path}: {e}")


def _save(flash_file: FlashFile) -> None:
    try:
        save_flash_file(flash_file)
    except OSError as e:
        logger.error("Error writing {}: {}", flash_file.filename, e)
        _fail(f"error writing {flash_file.filename}: {e}")


def select_flash_file(flash_files: list[FlashFile], presenter: Presenter, settings: Settings) -> Optional[FlashFile]:
    """Numbered menu of file titles. Only the first nine are selectable."""
    presenter.clear()
    for i, flash_file in enumerate(flash_files[:9], 1):
        presenter.show(f"{i}. " + "\n   ".join(flash_file.title.split("\n")), "title")
        presenter.show("")
    while True:
        key = presenter.read_key(f"Select a file (1-9) or press '{settings.quit_key}' to quit")
        if key == settings.quit_key:
            return None
        if len(key) == 1 and key in "123456789":
            idx = int(key) - 1
            if idx < len(flash_files):
                return flash_files[idx]


def show_scores(flash_file: FlashFile, result: SessionResult, presenter: Presenter) -> None:
    presenter.clear()
    presenter.show("Current score:", "title")
    presenter.show(result.score_line or f"{result.correct}/{result.total}", "score")
    presenter.show("")
    presenter.show("Previous scores:", "title")
    scores = previous_scores(flash_file)
    presenter.show("\n".join(scores) if scores else "No previous scores", "score")

    width, _ = presenter.size()
    trend = format_trend(score_percentages(scores), width=max(10, min(30, width // 3)))
    if trend:
        presenter.show("")
        presenter.show("Trend (oldest first):", "title")
        presenter.show("\n".join(trend), "score")
    presenter.show("")


def run_full_review(flash_file: FlashFile, presenter: Presenter, settings: Settings) -> None:
    result = full_review(flash_file, presenter, settings)
    if result is None:
        return
    if not result.completed:
        console.print(f"[yellow]Stopped after {result.total} card(s); nothing saved.[/yellow]")
        return
    if result.total == 0:
        console.print("[yellow]No cards in this file yet.[/yellow]")
        return
    show_scores(flash_file, result, presenter)
    presenter.read_key("Press any key to exit")
    _save(flash_file)
    typer.echo(f"{result.correct}/{result.total}")


@app.callback()
def _setup():
    configure_logging(get_settings())


@app.command()
def new(name: Optional[str] = typer.Argument(None, help="Name of the new file")):
    """Create an empty flashcard file."""
    settings = get_settings()
    if not name:
        _fail(
            "missing file name",
            f"Usage: flash new <name>\nCreates a new flashcard file "
            f"(will add {settings.extension} extension if not present)",
        )
    path = Path(ensure_extension(name, settings.extension))
    if path.exists():
        _fail(f"file {path} already exists")
    _save(new_flash_file(path))
    console.print(f"[green]Created {path}[/green]")


@app.command()
def add(file: Optional[str] = typer.Argument(None, help="Flashcard file")):
    """Add a card to a flashcard file."""
    settings = get_settings()
    path = _resolve_file(file, settings, "Usage: flash add file.flsh")
    if path.exists():
        flash_file = _load(path)
    else:
        flash_file = new_flash_file(path, title=path.name)

    presenter = make_presenter(settings)
    presenter.clear()
    front = presenter.read_text("please write card front:")
    if not front:
        return
    back = presenter.read_text("please write card back:")
    if not back:
        return

    flash_file.cards.append(Flashcard(front=front, back=back))
    _save(flash_file)
    console.print(f"[green]Added card {len(flash_file.cards)} to {path}[/green]")


@app.command()
def review(file: Optional[str] = typer.Argument(None, help="Flashcard file")):
    """Review the cards answered wrong last time."""
    settings = get_settings()
    path = _resolve_file(file, settings, "Usage: flash review file.flsh")
    flash_file = _load(path)

    result = review_wrong_cards(flash_file, make_presenter(settings), settings)
    if result is None:
        console.print("No cards to review - all cards were correct in last review!")
        return
    # Card history is saved even when the session was cut short.
    _save(flash_file)
    if result.total > 0:
        typer.echo(f"{result.correct}/{result.total}")


@app.command()
def study(file: Optional[str] = typer.Argument(None, help="Flashcard file")):
    """Review every card in a file (the default command)."""
    settings = get_settings()
    if file is None:
        paths = find_flash_files(settings.directory, settings.extension)
        if not paths:
            console.print(USAGE, highlight=False)
            raise typer.Exit(code=1)
        flash_files = []
        for path in paths:
            try:
                flash_files.append(load_flash_file(path))
            except OSError as e:
                logger.warning("Error reading {}: {}", path, e)
        if not flash_files:
            _fail(f"no valid {settings.extension} files found")
        presenter = make_presenter(settings)
        selected = select_flash_file(flash_files, presenter, settings)
        if selected is not None:
            run_full_review(selected, presenter, settings)
        return

    if file.endswith(settings.extension):
        path = Path(file)
    else:
        path = _resolve_file(None, settings, USAGE)
    flash_file = _load(path)
    run_full_review(flash_file, make_presenter(settings), settings)


def main():
    args = sys.argv[1:]
    if not args or (args[0] not in COMMANDS and not args[0].startswith("-")):
        args = ["study", *args]
    try:
        code = app(args=args, prog_name="flash", standalone_mode=False)
    except click.ClickException as e:
        e.show()
        sys.exit(1)
    except click.exceptions.Abort:
        sys.exit(1)
    sys.exit(code if isinstance(code, int) else 0)


if __name__ == "__main__":
    main()
