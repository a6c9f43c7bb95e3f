"""Configuration paths and defaults for local Gratitude state."""

from __future__ import annotations

import os
from pathlib import Path

BASE_DIR = Path(os.environ.get("GRATITUDE_HOME", str(Path.home() / ".gratitude"))).expanduser()
STATE_FILE = BASE_DIR / "state.json"
RECORDS_FILE = BASE_DIR / "records.jsonl"
CONFIG_FILE = BASE_DIR / "config.toml"

DEFAULT_COLOR_THEME = "Default Dark Modern"
DEFAULT_INACTIVITY_SECONDS = 1800.0
DEFAULT_DISMISS_SECONDS = 10.0
RECORD_TIMEOUT_SECONDS = 10

HOVER_MESSAGE = "Right-click on the raised hands icon to say thanks"
INACTIVITY_MESSAGE = "Send a note of thanks to other developers!"
THANKS_SENT_MESSAGE = (
    "Your thanks has been sent! If you feel inspired to share more, don't hesitate "
    "to send a note to the contributors. Your words of encouragement can make a world "
    "of difference and let them know just how much their efforts are valued."
)
SURVEY_MESSAGE = "Please complete this quick survey!"
SAY_MORE_ACTION = "Say More"
FILL_OUT_SURVEY_ACTION = "Fill Out Survey"

SAY_MORE_FORM_URL = "https://cmu.ca1.qualtrics.com/jfe/form/SV_3Oj5m8n4yE0oHRk"
SURVEY_FORM_URL = "https://cmu.ca1.qualtrics.com/jfe/form/SV_eEUHt3Lb3sOifMG"

# Host-visible context key toggled by the has-import flag
HAS_IMPORT_CONTEXT_KEY = "gratitude.hasImport"


def ensure_base_dirs() -> None:
    """Create the base directory for local state if needed."""
    BASE_DIR.mkdir(parents=True, exist_ok=True)
