"""Import-count change detector.

Keeps the number of import statements seen on the last check and notifies
once each time a re-check finds more than that.  The count is overwritten on
every check, so dropping an import and adding it back notifies again.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, List, Optional

from .matchers import get_matcher
from .models import ContentChange, Document

logger = logging.getLogger(__name__)

NEW_IMPORT_MESSAGE = "A new import statement was detected!"

# The lighter count is only wired up for these tags.
DETECTOR_LANGUAGES = ("typescript", "python")


def parse_import_statements(document: Document) -> List[str]:
    if document.language_id not in DETECTOR_LANGUAGES:
        return []
    matcher = get_matcher(document.language_id)
    if matcher is None:
        return []
    return matcher.list_statements(document.get_text())


class ImportStatementDetector:
    """Notify when a document gains import statements."""

    def __init__(self, notify: Optional[Callable[[str], None]] = None) -> None:
        self.last_import_count = 0
        self._notify = notify

    def on_text_changed(self, document: Document, content_changes: Iterable[ContentChange]) -> bool:
        """Re-check only when one of the changes inserted a newline."""
        for change in content_changes:
            if "\n" in change.text:
                return self.check_import_statements(document)
        return False

    def on_manual_trigger(self, document: Document) -> bool:
        return self.check_import_statements(document)

    def check_import_statements(self, document: Document) -> bool:
        """Re-count statements; return True when a notification was sent."""
        count = len(parse_import_statements(document))
        increased = count > self.last_import_count
        logger.debug("Import count %d -> %d", self.last_import_count, count)
        if increased and self._notify is not None:
            self._notify(NEW_IMPORT_MESSAGE)
        self.last_import_count = count
        return increased
