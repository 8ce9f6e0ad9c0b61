"""Terminal presentation for review sessions.

Session code talks to a ``Presenter``: it shows blocks of text and waits for
one key at a time. ``RichPresenter`` is the terminal implementation.
"""
from typing import Optional, Protocol

from rich.console import Console
from rich.prompt import Prompt
from rich.text import Text
from rich.theme import Theme

from flashdeck.config import Settings

ENTER = "\n"
ADVANCE_KEYS = (ENTER, " ")


class Presenter(Protocol):
    def clear(self) -> None: ...

    def show(self, text: str, style: Optional[str] = None) -> None: ...

    def read_key(self, prompt: str) -> str: ...

    def read_text(self, prompt: str) -> str: ...

    def size(self) -> tuple[int, int]: ...


def build_theme(settings: Settings) -> Theme:
    return Theme({
        "title": settings.title_style,
        "prompt": settings.prompt_style,
        "score": settings.score_style,
        "correct": settings.correct_style,
        "wrong": settings.wrong_style,
        "text": settings.text_style,
    })


class RichPresenter:
    def __init__(self, settings: Settings, console: Optional[Console] = None):
        self.settings = settings
        self.console = console or Console(theme=build_theme(settings))

    def clear(self) -> None:
        self.console.clear()

    def show(self, text: str, style: Optional[str] = None) -> None:
        # Text, not markup: card content may contain square brackets.
        self.console.print(Text(text, style=style or "text"))

    def read_key(self, prompt: str) -> str:
        """Return the first character typed, or ENTER for an empty line.

        Ctrl-C and end of input count as the quit key.
        """
        try:
            value = Prompt.ask(
                Text(prompt, style="prompt"), console=self.console,
                default="", show_default=False,
            )
        except (KeyboardInterrupt, EOFError):
            return self.settings.quit_key
        return value[0] if value else ENTER

    def read_text(self, prompt: str) -> str:
        """Collect lines until an empty one. Returns "" when cancelled."""
        self.console.print(Text(prompt, style="prompt"))
        self.console.print(Text("(empty line to finish, Ctrl-C to cancel)", style="dim"))
        lines = []
        try:
            while True:
                line = self.console.input("> ")
                if not line.strip():
                    break
                lines.append(line.rstrip())
        except (KeyboardInterrupt, EOFError):
            return ""
        return "\n".join(lines)

    def size(self) -> tuple[int, int]:
        width, height = self.console.size
        return width, height
