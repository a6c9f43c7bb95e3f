"""Core data models shared by the matchers, the engine and the session layer."""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Set

# ---------------------------------------------------------------------------
# Language <-> file-extension mapping
# ---------------------------------------------------------------------------
LANGUAGE_MAP = {
    ".py": "python",
    ".pyw": "python",
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".ts": "typescript",
    ".tsx": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
}

SUPPORTED_LANGUAGES = {"python", "javascript", "typescript"}
OTHER_LANGUAGE = "other"


def language_for_path(path: Path) -> str:
    return LANGUAGE_MAP.get(path.suffix.lower(), OTHER_LANGUAGE)


class Document:
    """Read-only text buffer with a language tag.

    Lines are split the way an editor splits them: ``"a\\n"`` has two lines
    (the second one empty) and a trailing ``\\r`` is not part of a line.
    """

    def __init__(self, text: str, language_id: str = OTHER_LANGUAGE, path: Optional[Path] = None) -> None:
        self._text = text
        self.language_id = language_id
        self.path = path
        self._lines = [line[:-1] if line.endswith("\r") else line for line in text.split("\n")]
        self._line_starts: List[int] = [0]
        for idx, ch in enumerate(text):
            if ch == "\n":
                self._line_starts.append(idx + 1)

    @classmethod
    def from_path(cls, path: Path, language: Optional[str] = None) -> "Document":
        text = path.read_text(encoding="utf-8", errors="ignore")
        return cls(text, language or language_for_path(path), path=path)

    def get_text(self) -> str:
        return self._text

    @property
    def line_count(self) -> int:
        return len(self._lines)

    def line_at(self, index: int) -> str:
        if index < 0 or index >= len(self._lines):
            raise IndexError(f"line {index} out of range (0..{len(self._lines) - 1})")
        return self._lines[index]

    def line_of_offset(self, offset: int) -> int:
        """Map a character offset into the text to its 0-based line."""
        offset = max(0, min(offset, len(self._text)))
        return bisect_right(self._line_starts, offset) - 1

    def __repr__(self) -> str:
        return f"Document(language_id={self.language_id!r}, lines={self.line_count})"


@dataclass
class ImportBinding:
    bound_name: str
    source_module: str
    line: int


@dataclass
class StatementMatch:
    """One import/require statement recognized by a statement matcher."""
    line: int
    offset: int
    module: str
    names: List[str]
    is_external: bool
    text: str = ""


@dataclass
class EngineResult:
    line_numbers: Set[int] = field(default_factory=set)
    has_any_import: bool = False
    bindings: List[ImportBinding] = field(default_factory=list)
    statement_lines: Set[int] = field(default_factory=set)

    @property
    def bound_names(self) -> Set[str]:
        return {b.bound_name for b in self.bindings}

    def sorted_lines(self) -> List[int]:
        return sorted(self.line_numbers)


@dataclass
class ContentChange:
    """A single edit reported by the host: the text it inserted."""
    text: str
    start_line: int = 0


@dataclass
class Decoration:
    line: int
    column: int = 0
    theme: str = "dark"


@dataclass
class Hover:
    message: str
    line: int
    start_column: int = 0
    end_column: int = 1
