"""Persistent identity and survey-counter state."""

from __future__ import annotations

import json
import logging
import random
import threading
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from . import config
from .records import USERS_COLLECTION, RecordSink, submit_in_background

logger = logging.getLogger(__name__)

# Survey prompt appears after this many thanks, chosen at random
INITIAL_COUNTER_RANGE = (0, 4)
RESET_COUNTER_RANGE = (1, 4)


class IdentityStore:
    """Manage the anonymous user id and the survey counter in ``state.json``."""

    def __init__(
        self,
        state_file: Optional[Path] = None,
        sink: Optional[RecordSink] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.state_file = state_file or config.STATE_FILE
        self.sink = sink
        self.rng = rng or random.Random()
        self.submissions: List[threading.Thread] = []

    def _load(self) -> Dict[str, Any]:
        if not self.state_file.exists():
            return {}
        try:
            payload = json.loads(self.state_file.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as exc:
            logger.warning("Ignoring unreadable state file %s: %s", self.state_file, exc)
            return {}
        return payload if isinstance(payload, dict) else {}

    def _update(self, key: str, value: Any) -> None:
        payload = self._load()
        payload[key] = value
        try:
            self.state_file.parent.mkdir(parents=True, exist_ok=True)
            self.state_file.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        except OSError as exc:
            logger.warning("Could not persist '%s' to %s: %s", key, self.state_file, exc)

    def get_user_id(self) -> str:
        """Return the stored user id, registering a new one on first use."""
        user_id = self._load().get("id")
        if user_id:
            logger.debug("ID exists: %s", user_id)
            return str(user_id)

        user_id = uuid.uuid4().hex
        self._update("id", user_id)
        if self.sink is not None:
            self.submissions.append(submit_in_background(self.sink, USERS_COLLECTION, {
                "userId": user_id,
                "timestamp": datetime.now(),
            }))
        logger.debug("New ID: %s", user_id)
        return user_id

    def load_counter(self) -> int:
        """Stored counter, or a fresh random one when missing or zero."""
        counter = self._load().get("counter")
        if isinstance(counter, int) and counter:
            return counter
        return self.rng.randint(*INITIAL_COUNTER_RANGE)

    def save_counter(self, counter: int) -> None:
        self._update("counter", counter)

    def advance_counter(self, counter: int) -> Tuple[int, bool]:
        """Count one thanks down.

        Returns the new counter and whether the survey is due.  At zero the
        counter is reset to a random value and the survey becomes due.
        """
        if counter == 0:
            counter = self.rng.randint(*RESET_COUNTER_RANGE)
            self.save_counter(counter)
            return counter, True
        if counter > 0:
            counter -= 1
            self.save_counter(counter)
        return counter, False
