"""Terminal display layer: gutter decorations, hover text and notifications."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Sequence

import typer
from rich.console import Console
from rich.table import Table
from rich.text import Text

from .models import Decoration, Document

LIGHT_THEME = "light"
DARK_THEME = "dark"

GUTTER_ICON = "🙌"
GUTTER_STYLES = {
    LIGHT_THEME: "bold dark_orange3",
    DARK_THEME: "bold yellow",
}


def detect_color_theme(theme_name: Optional[str]) -> str:
    """Map a color theme name to ``light`` or ``dark``."""
    if theme_name and "Light" in theme_name:
        return LIGHT_THEME
    return DARK_THEME


def build_decorations(line_numbers: Iterable[int], theme: str) -> List[Decoration]:
    return [Decoration(line=line, column=0, theme=theme) for line in sorted(set(line_numbers))]


def render_document(
    console: Console,
    document: Document,
    decorations: Sequence[Decoration],
    only_decorated: bool = False,
) -> None:
    """Print *document* with a gutter column marking decorated lines."""
    decorated = {d.line: d for d in decorations}
    table = Table(show_header=False, box=None, pad_edge=False, padding=(0, 1))
    table.add_column("gutter", width=2, no_wrap=True)
    table.add_column("line", justify="right", style="dim", no_wrap=True)
    table.add_column("code", overflow="fold")

    for line_number in range(document.line_count):
        decoration = decorated.get(line_number)
        if only_decorated and decoration is None:
            continue
        if decoration is not None:
            gutter = Text(GUTTER_ICON, style=GUTTER_STYLES.get(decoration.theme, GUTTER_STYLES[DARK_THEME]))
        else:
            gutter = Text("")
        table.add_row(gutter, str(line_number + 1), Text(document.line_at(line_number)))

    console.print(table)


# ===================================================================
# Notifications
# ===================================================================

class Notifier(ABC):
    """Where the session sends user-facing messages."""

    @abstractmethod
    def show(self, message: str, dismiss_after: Optional[float] = None) -> None:
        ...

    @abstractmethod
    def ask(self, message: str, action: str) -> bool:
        """Show *message* offering *action*; return True if it was chosen."""
        ...


class ConsoleNotifier(Notifier):
    """Rich console notifications; ``ask`` prompts unless ``assume_yes``."""

    def __init__(self, console: Optional[Console] = None, assume_yes: Optional[bool] = None) -> None:
        self.console = console or Console()
        self.assume_yes = assume_yes

    def show(self, message: str, dismiss_after: Optional[float] = None) -> None:
        # A terminal line cannot be taken back, so auto-dismiss is only noted.
        suffix = f" [dim](dismisses in {dismiss_after:g}s)[/dim]" if dismiss_after else ""
        self.console.print(f"[cyan]ℹ[/cyan] {message}{suffix}")

    def ask(self, message: str, action: str) -> bool:
        self.console.print(f"[cyan]ℹ[/cyan] {message}")
        if self.assume_yes is not None:
            return self.assume_yes
        return typer.confirm(action, default=False)


class RecordingNotifier(Notifier):
    """Collects messages in memory; answers every ``ask`` with *answer*."""

    def __init__(self, answer: bool = False) -> None:
        self.answer = answer
        self.messages: List[str] = []
        self.asked: List[str] = []

    def show(self, message: str, dismiss_after: Optional[float] = None) -> None:
        self.messages.append(message)

    def ask(self, message: str, action: str) -> bool:
        self.messages.append(message)
        self.asked.append(action)
        return self.answer
