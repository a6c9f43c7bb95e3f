"""Watch mode: re-flag a file every time it is saved."""

from __future__ import annotations

import difflib
import logging
import threading
import time
from pathlib import Path
from typing import Callable, List, Optional

import typer
from rich.console import Console

from .display import ConsoleNotifier, render_document
from .models import ContentChange, Document, EngineResult
from .session import GratitudeSession
from .timers import CancelableTimer, TimerSlot

logger = logging.getLogger(__name__)

console = Console()


def diff_changes(old_text: str, new_text: str) -> List[ContentChange]:
    """Describe the edit from *old_text* to *new_text* as inserted chunks.

    Deletions become empty insertions so a pure delete still counts as a
    change, but never as one that inserted a newline.
    """
    old_lines = old_text.splitlines(keepends=True)
    new_lines = new_text.splitlines(keepends=True)
    matcher = difflib.SequenceMatcher(a=old_lines, b=new_lines, autojunk=False)
    changes: List[ContentChange] = []
    for tag, _i1, _i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            continue
        changes.append(ContentChange(text="".join(new_lines[j1:j2]), start_line=j1))
    return changes


class DocumentChangeHandler:
    """Turn file system events for one file into session text changes."""

    def __init__(
        self,
        path: Path,
        session: GratitudeSession,
        language: Optional[str] = None,
        debounce_seconds: float = 0.3,
        on_refresh: Optional[Callable[[Document, EngineResult], None]] = None,
        timer_factory: Callable[[float, Callable[[], None]], CancelableTimer] = CancelableTimer,
    ) -> None:
        self.path = path.resolve()
        self.session = session
        self.on_refresh = on_refresh
        self.document = Document.from_path(self.path, language)
        self.session.open_document(self.document)
        self._debounce = TimerSlot(debounce_seconds, self.reload, timer_factory)
        self._reload_lock = threading.Lock()

    def dispatch(self, event) -> None:
        """Route events to the debounced reload."""
        if event.is_directory:
            return
        candidates = [getattr(event, "src_path", ""), getattr(event, "dest_path", "")]
        if any(c and Path(str(c)).resolve() == self.path for c in candidates):
            self._debounce.schedule()

    def reload(self) -> Optional[EngineResult]:
        """Re-read the file and feed the edit to the session, one reload at a time."""
        with self._reload_lock:
            return self._reload()

    def _reload(self) -> Optional[EngineResult]:
        try:
            new_document = Document.from_path(self.path, self.document.language_id)
        except OSError as exc:
            logger.warning("Could not re-read %s: %s", self.path, exc)
            return None

        changes = diff_changes(self.document.get_text(), new_document.get_text())
        if not changes:
            return None

        if self.session.active_document is self.document:
            self.session.active_document = new_document
        self.document = new_document
        result = self.session.text_changed(new_document, changes)
        if result is not None and self.on_refresh is not None:
            self.on_refresh(new_document, result)
        return result

    def stop(self) -> None:
        self._debounce.stop()


def watch(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Source file to watch."),
    language: Optional[str] = typer.Option(None, "--language", "-l", help="Override the language tag."),
    interval: float = typer.Option(0.3, "--interval", "-i", help="Debounce interval in seconds."),
):
    """👀 Watch mode: re-flag library-usage lines whenever the file is saved.

    Example:
      gratitude watch app.py
      gratitude watch src/index.ts --interval 1
    """
    try:
        from watchdog.events import FileSystemEventHandler
        from watchdog.observers import Observer
    except ImportError:
        console.print("[red]✗[/red] watchdog is not installed.")
        console.print("[dim]Install with: pip install watchdog[/dim]")
        raise typer.Exit(1)

    session = GratitudeSession(notifier=ConsoleNotifier(console))

    def show(document: Document, result: EngineResult) -> None:
        console.rule(f"{document.path.name if document.path else 'document'}")
        render_document(console, document, session.state.decorations, only_decorated=True)
        console.print(f"[dim]{len(result.line_numbers)} flagged line(s)[/dim]")

    handler = DocumentChangeHandler(path, session, language, interval, on_refresh=show)
    show(handler.document, session.state.result)

    class WatchdogAdapter(FileSystemEventHandler):
        def on_modified(self, event):
            handler.dispatch(event)

        def on_created(self, event):
            handler.dispatch(event)

        def on_moved(self, event):
            handler.dispatch(event)

    console.print(f"\n[bold green]👀 Watching[/bold green] [cyan]{handler.path}[/cyan] for changes...")
    console.print(f"[dim]  Language:  {handler.document.language_id}")
    console.print(f"  Debounce:  {interval}s")
    console.print("  Press Ctrl+C to stop[/dim]\n")

    observer = Observer()
    observer.schedule(WatchdogAdapter(), str(handler.path.parent), recursive=False)
    observer.start()

    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        observer.stop()
        console.print("\n[yellow]Stopped watching.[/yellow]")
    finally:
        handler.stop()
        session.close()
        session.flush()

    observer.join()
