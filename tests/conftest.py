"""Pytest configuration and fixtures for Gratitude CLI tests."""

import shutil
import tempfile
from pathlib import Path
from typing import Callable, Generator, List

import pytest

from gratitude_cli.config_manager import Settings
from gratitude_cli.display import RecordingNotifier
from gratitude_cli.models import Document
from gratitude_cli.records import RecordSink
from gratitude_cli.storage import IdentityStore


class FakeTimer:
    """Stand-in for CancelableTimer that only fires when told to."""

    def __init__(self, delay_seconds: float, callback: Callable[[], None]):
        self.delay_seconds = delay_seconds
        self.callback = callback
        self.started = False
        self.cancelled = False

    def start(self) -> None:
        self.started = True

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> None:
        if self.started and not self.cancelled:
            self.callback()


class MemorySink(RecordSink):
    """Keeps submitted records in a list."""

    def __init__(self):
        self.records: List[tuple] = []

    def submit(self, collection, record):
        self.records.append((collection, record))


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    tmp = Path(tempfile.mkdtemp())
    yield tmp
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture(autouse=True)
def gratitude_home(temp_dir: Path, monkeypatch) -> Path:
    """Point every config path at a temporary home directory."""
    home = temp_dir / "home"
    monkeypatch.setattr("gratitude_cli.config.BASE_DIR", home)
    monkeypatch.setattr("gratitude_cli.config.STATE_FILE", home / "state.json")
    monkeypatch.setattr("gratitude_cli.config.RECORDS_FILE", home / "records.jsonl")
    monkeypatch.setattr("gratitude_cli.config.CONFIG_FILE", home / "config.toml")
    return home


@pytest.fixture
def sample_files_path() -> Path:
    """Get path to the sample source files."""
    return Path(__file__).parent / "fixtures" / "sample_files"


@pytest.fixture
def timers() -> List[FakeTimer]:
    """Timers created through ``timer_factory``, newest last."""
    return []


@pytest.fixture
def timer_factory(timers: List[FakeTimer]) -> Callable[[float, Callable[[], None]], FakeTimer]:
    def _factory(delay_seconds, callback):
        timer = FakeTimer(delay_seconds, callback)
        timers.append(timer)
        return timer
    return _factory


@pytest.fixture
def memory_sink() -> MemorySink:
    return MemorySink()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier(answer=True)


@pytest.fixture
def identity(temp_dir: Path, memory_sink: MemorySink) -> IdentityStore:
    import random
    return IdentityStore(state_file=temp_dir / "state.json", sink=memory_sink, rng=random.Random(7))


@pytest.fixture
def settings() -> Settings:
    return Settings(inactivity_seconds=60.0, dismiss_seconds=5.0)


@pytest.fixture
def session(settings, notifier, memory_sink, identity, timer_factory):
    from gratitude_cli.session import GratitudeSession

    s = GratitudeSession(
        settings=settings,
        notifier=notifier,
        sink=memory_sink,
        identity=identity,
        timer_factory=timer_factory,
    )
    yield s
    s.close()
    s.flush(timeout=2)


@pytest.fixture
def python_document() -> Document:
    return Document("import os\nos.path.join(1,2)\n", "python")


@pytest.fixture
def typescript_document() -> Document:
    return Document("import { x as y } from 'libname'\ny.call()\n", "typescript")
