"""Session controller: owns host-side state and routes editor events.

The engine itself is stateless; everything that has to survive between
events (theme, cached line numbers, decorations, the active line, the
has-import flag, the change detector and the inactivity timer) lives on one
:class:`GratitudeSession` instead of in module globals.
"""

from __future__ import annotations

import json
import logging
import threading
import urllib.parse
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional

from . import config
from .config_manager import Settings, load_settings
from .detector import ImportStatementDetector
from .display import ConsoleNotifier, Notifier, build_decorations, detect_color_theme
from .engine import extract
from .models import ContentChange, Decoration, Document, EngineResult, Hover
from .records import RESPONSES_COLLECTION, RecordSink, make_sink, submit_in_background
from .storage import IdentityStore
from .timers import CancelableTimer, TimerSlot

logger = logging.getLogger(__name__)

IMPORT_KEYWORDS = ("import", "require")


def mentions_imports(document: Document) -> bool:
    text = document.get_text()
    return any(keyword in text for keyword in IMPORT_KEYWORDS)


def encode_uri_component(value: str) -> str:
    """Percent-encode like JavaScript's ``encodeURIComponent``."""
    return urllib.parse.quote(value, safe="!~*'()")


def build_form_url(base_url: str, user_id: str, question_id: str, active_line: str) -> str:
    populate = json.dumps({question_id: active_line}, separators=(",", ":"))
    return f"{base_url}?userid={user_id}&Q_PopulateResponse={encode_uri_component(populate)}"


@dataclass
class ThanksOutcome:
    record: Dict[str, Any]
    say_more_url: Optional[str] = None
    survey_url: Optional[str] = None
    counter: int = 0
    survey_offered: bool = False


@dataclass
class SessionState:
    theme: str = "dark"
    result: EngineResult = field(default_factory=EngineResult)
    decorations: List[Decoration] = field(default_factory=list)
    active_line: Optional[str] = None
    context: Dict[str, bool] = field(default_factory=lambda: {config.HAS_IMPORT_CONTEXT_KEY: False})


class GratitudeSession:
    """One host session: a sequence of editor events against documents."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        notifier: Optional[Notifier] = None,
        sink: Optional[RecordSink] = None,
        identity: Optional[IdentityStore] = None,
        timer_factory: Callable[[float, Callable[[], None]], CancelableTimer] = CancelableTimer,
    ) -> None:
        self.settings = settings or load_settings()
        self.notifier = notifier or ConsoleNotifier()
        self.sink = sink or make_sink(self.settings.records_endpoint)
        self.identity = identity or IdentityStore(sink=self.sink)
        self.state = SessionState(theme=detect_color_theme(self.settings.color_theme))
        self.active_document: Optional[Document] = None
        self.detector = ImportStatementDetector(notify=self.notifier.show)
        self.inactivity = TimerSlot(self.settings.inactivity_seconds, self._on_inactive, timer_factory)
        self._user_id: Optional[str] = None
        self._counter: Optional[int] = None
        self.submissions: List[threading.Thread] = []

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------

    @property
    def user_id(self) -> str:
        if self._user_id is None:
            self._user_id = self.identity.get_user_id()
        return self._user_id

    @property
    def counter(self) -> int:
        if self._counter is None:
            self._counter = self.identity.load_counter()
        return self._counter

    # ------------------------------------------------------------------
    # Derived state
    # ------------------------------------------------------------------

    @property
    def line_numbers(self) -> List[int]:
        return self.state.result.sorted_lines()

    @property
    def has_import(self) -> bool:
        return self.state.context[config.HAS_IMPORT_CONTEXT_KEY]

    def refresh(self, document: Document) -> EngineResult:
        """Re-run the engine and replace decorations and the context flag."""
        result = extract(document)
        self.state.result = result
        self.state.decorations = build_decorations(result.line_numbers, self.state.theme)
        self.state.context[config.HAS_IMPORT_CONTEXT_KEY] = result.has_any_import
        return result

    # ------------------------------------------------------------------
    # Editor events
    # ------------------------------------------------------------------

    def open_document(self, document: Document) -> EngineResult:
        self.active_document = document
        result = self.refresh(document)
        self.check_for_keyword()
        return result

    def switch_editor(self, document: Optional[Document]) -> Optional[EngineResult]:
        self.active_document = document
        if document is None:
            return None
        result = self.refresh(document)
        self.check_for_keyword()
        return result

    def text_changed(self, document: Document, changes: Iterable[ContentChange]) -> Optional[EngineResult]:
        changes = list(changes)
        self.inactivity.schedule()
        self.detector.on_text_changed(document, changes)
        if document is not self.active_document:
            return None
        return self.refresh(document)

    def selection_changed(self) -> None:
        self.inactivity.schedule()

    def change_theme(self, theme_name: str) -> str:
        """Switch light/dark and re-apply the cached decorations."""
        self.state.theme = detect_color_theme(theme_name)
        self.state.decorations = build_decorations(self.state.result.line_numbers, self.state.theme)
        return self.state.theme

    def hover(self, line: int) -> Optional[Hover]:
        if line in self.state.result.line_numbers:
            return Hover(message=config.HOVER_MESSAGE, line=line, start_column=0, end_column=1)
        return None

    # ------------------------------------------------------------------
    # Inactivity reminder
    # ------------------------------------------------------------------

    def check_for_keyword(self) -> None:
        """Arm the reminder when the active document mentions imports."""
        if self.active_document is None:
            return
        if mentions_imports(self.active_document):
            self.inactivity.schedule()
        else:
            self.inactivity.stop()

    def _on_inactive(self) -> None:
        document = self.active_document
        if document is not None and mentions_imports(document):
            self.notifier.show(config.INACTIVITY_MESSAGE, dismiss_after=self.settings.dismiss_seconds)

    def flush(self, timeout: float = config.RECORD_TIMEOUT_SECONDS) -> None:
        """Wait up to *timeout* seconds for outstanding record submissions."""
        for thread in self.submissions + self.identity.submissions:
            thread.join(timeout)
        self.submissions.clear()
        self.identity.submissions.clear()

    def close(self) -> None:
        self.inactivity.stop()

    # ------------------------------------------------------------------
    # Say-thanks workflow
    # ------------------------------------------------------------------

    def say_thanks(self, document: Document, line_number: int) -> ThanksOutcome:
        """Send thanks for the 1-based *line_number* of *document*."""
        if line_number < 1 or line_number > document.line_count:
            raise ValueError(f"Line {line_number} is outside 1..{document.line_count}")

        self.state.active_line = document.line_at(line_number - 1)
        record = {
            "lineNumber": line_number,
            "activeLine": self.state.active_line,
            "timestamp": datetime.now(),
            "userId": self.user_id,
        }
        logger.debug("Counter: %s", self.counter)
        self.submissions.append(submit_in_background(self.sink, RESPONSES_COLLECTION, record))

        outcome = ThanksOutcome(record=record)
        if self.notifier.ask(config.THANKS_SENT_MESSAGE, config.SAY_MORE_ACTION):
            outcome.say_more_url = self.say_more_url()

        self._counter, survey_due = self.identity.advance_counter(self.counter)
        outcome.counter = self._counter
        if survey_due:
            outcome.survey_offered = True
            if self.notifier.ask(config.SURVEY_MESSAGE, config.FILL_OUT_SURVEY_ACTION):
                outcome.survey_url = self.survey_url()
        return outcome

    def say_more_url(self) -> Optional[str]:
        if not self.state.active_line:
            return None
        return build_form_url(config.SAY_MORE_FORM_URL, self.user_id, "QID4", self.state.active_line)

    def survey_url(self) -> Optional[str]:
        if not self.state.active_line:
            return None
        return build_form_url(config.SURVEY_FORM_URL, self.user_id, "QID11", self.state.active_line)
