"""Outbound record submission (thanks responses, user registrations).

Records are one-way messages: callers hand them to a sink and move on.
Failures are logged here and never reach the caller.
"""

from __future__ import annotations

import http.client
import json
import logging
import threading
import urllib.error
import urllib.request
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from . import __version__, config

logger = logging.getLogger(__name__)

USERS_COLLECTION = "users"
RESPONSES_COLLECTION = "responses"


def _json_default(value: Any) -> str:
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


class RecordSink(ABC):
    """Destination for outbound records."""

    @abstractmethod
    def submit(self, collection: str, record: Dict[str, Any]) -> None:
        """Store *record* in *collection*. May raise on I/O failure."""
        ...


class FileRecordSink(RecordSink):
    """Append records as JSON lines to a local file."""

    def __init__(self, path: Optional[Path] = None) -> None:
        self.path = path or config.RECORDS_FILE
        self._lock = threading.Lock()

    def submit(self, collection: str, record: Dict[str, Any]) -> None:
        line = json.dumps({"collection": collection, **record}, default=_json_default)
        with self._lock:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "a", encoding="utf-8") as f:
                f.write(line + "\n")
        logger.debug("Record saved to %s (%s)", self.path, collection)


class HttpRecordSink(RecordSink):
    """POST records as JSON to ``<endpoint>/<collection>``."""

    def __init__(self, endpoint: str, timeout: float = config.RECORD_TIMEOUT_SECONDS) -> None:
        self.endpoint = endpoint.rstrip("/")
        self.timeout = timeout

    def submit(self, collection: str, record: Dict[str, Any]) -> None:
        payload = json.dumps(record, default=_json_default).encode("utf-8")
        req = urllib.request.Request(
            f"{self.endpoint}/{collection}",
            data=payload,
            headers={
                "Content-Type": "application/json",
                "User-Agent": f"Gratitude-CLI/{__version__}",
            },
            method="POST",
        )
        with urllib.request.urlopen(req, timeout=self.timeout) as resp:
            logger.debug("Record posted to %s (%s): HTTP %s", self.endpoint, collection, resp.status)


def make_sink(endpoint: str = "") -> RecordSink:
    if endpoint:
        return HttpRecordSink(endpoint)
    return FileRecordSink()


def submit_safely(sink: RecordSink, collection: str, record: Dict[str, Any]) -> bool:
    """Submit *record*, logging instead of raising. Returns success."""
    try:
        sink.submit(collection, record)
        return True
    except (OSError, urllib.error.URLError, http.client.HTTPException, ValueError, TypeError) as exc:
        logger.warning("Error saving record to '%s': %s", collection, exc)
        return False


def submit_in_background(sink: RecordSink, collection: str, record: Dict[str, Any]) -> threading.Thread:
    """Fire-and-forget submission on a daemon thread."""
    thread = threading.Thread(
        target=submit_safely,
        args=(sink, collection, record),
        name=f"gratitude-submit-{collection}",
        daemon=True,
    )
    thread.start()
    return thread
