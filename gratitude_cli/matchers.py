"""Lexical statement matchers for import/require syntax.

Each matcher recognizes the import statements of one language family and
resolves the names those statements bind.  Matching is purely textual: no
tokenizer, no AST.  Anything the patterns do not recognize is skipped, so a
matcher never raises on malformed input.

Two families are modelled:

- Python: ``import a, b as c`` and ``from pkg.mod import x as y``
- JS/TS: ``import ... from 'pkg'`` and ``const { a, b } = require('pkg');``
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Tuple

from .models import Document, StatementMatch

logger = logging.getLogger(__name__)

# Specifiers starting with one of these are local files, not libraries.
LOCAL_SPECIFIER_PREFIXES: Tuple[str, ...] = ("./", "/")


# ===================================================================
# Abstract Matcher Interface
# ===================================================================

class StatementMatcher(ABC):
    """Abstract base class for language-specific statement recognizers."""

    language_ids: Tuple[str, ...] = ()

    @abstractmethod
    def recognize_statements(self, document: Document) -> List[StatementMatch]:
        """Return every recognized statement, ordered by position."""
        ...

    @abstractmethod
    def list_statements(self, text: str) -> List[str]:
        """Lighter statement-only scan used for counting imports."""
        ...

    def supports_language(self, language: str) -> bool:
        return language in self.language_ids


# ===================================================================
# Python
# ===================================================================

_PY_IMPORT_RE = re.compile(
    r"^([ \t]*(?:from[ \t]+[\w.]+[ \t]+)?import[ \t]+[\w*, ]+(?:[ \t]+as[ \t]+\w+)?)\b",
    re.MULTILINE,
)
_PY_FROM_RE = re.compile(r"^from[ \t]+([\w.]+)")
_PY_KEYWORD_SPLIT = re.compile(r"^(?:import|from)\s+")
_PY_IMPORT_SPLIT = re.compile(r"\s+import\s+")
_COMMA_SPLIT = re.compile(r"\s*,\s*")
_AS_SPLIT = re.compile(r"\s+as\s+")


class PythonStatementMatcher(StatementMatcher):
    """``import`` / ``from ... import`` statements."""

    language_ids = ("python",)

    def recognize_statements(self, document: Document) -> List[StatementMatch]:
        matches: List[StatementMatch] = []
        for m in _PY_IMPORT_RE.finditer(document.get_text()):
            statement = m.group(1).strip()
            from_match = _PY_FROM_RE.match(statement)
            matches.append(StatementMatch(
                line=document.line_of_offset(m.start()),
                offset=m.start(),
                module=from_match.group(1) if from_match else "",
                names=self.resolve_names(statement),
                is_external=True,
                text=statement,
            ))
        return matches

    def list_statements(self, text: str) -> List[str]:
        return [m.group(1) for m in _PY_IMPORT_RE.finditer(text)]

    @staticmethod
    def resolve_names(statement: str) -> List[str]:
        """Resolve the locally bound names of one trimmed statement.

        ``from foo import bar`` leaves ``foo import bar`` as the first item
        after the keyword split, hence the second split on ``import``.
        """
        parts = _PY_KEYWORD_SPLIT.split(statement, maxsplit=1)
        if len(parts) < 2:
            return []

        names: List[str] = []
        for item in (i.strip() for i in _COMMA_SPLIT.split(parts[1])):
            split_by_as = _AS_SPLIT.split(item)
            if len(split_by_as) == 1:
                name = split_by_as[0]
                if "import" in name:
                    name = _PY_IMPORT_SPLIT.split(name)[-1]
            else:
                name = split_by_as[1]
            name = name.strip()
            if name:
                names.append(name)
        return names


# ===================================================================
# JavaScript / TypeScript
# ===================================================================

_ES_IMPORT_RE = re.compile(r"""^import\s+.*\s+from\s+['"](.*)['"]""", re.MULTILINE)
_ES_FROM_SPLIT = re.compile(r"\s+from\s+")
_ES_IMPORT_SPLIT = re.compile(r"\s*import\s+")
_QUOTED_START = re.compile(r"""^(['"])(.*?)\1""")
_REQUIRE_RE = re.compile(
    r"""(const|let)\s+\{?\s*([\w,\s]+)\s*\}?\s*=\s*require\s*\(\s*['"]([^'"]+)['"]\s*\)[^;]*;"""
)
_OPEN_BRACE_SPLIT = re.compile(r"\s*\{\s*")
_CLOSE_BRACE_SPLIT = re.compile(r"\s*\}\s*")
_WHITESPACE = re.compile(r"\s")


def is_local_specifier(specifier: str) -> bool:
    return specifier.strip().startswith(LOCAL_SPECIFIER_PREFIXES)


class ScriptStatementMatcher(StatementMatcher):
    """ES ``import ... from`` and destructuring ``require`` statements."""

    language_ids = ("javascript", "typescript")

    def recognize_statements(self, document: Document) -> List[StatementMatch]:
        text = document.get_text()
        matches = self._es_imports(document, text) + self._requires(document, text)
        matches.sort(key=lambda s: s.offset)
        return matches

    def list_statements(self, text: str) -> List[str]:
        # Counting only looks at the ES form and keeps local specifiers.
        return [self.split_import(m.group(0))[1] for m in _ES_IMPORT_RE.finditer(text)]

    def _es_imports(self, document: Document, text: str) -> List[StatementMatch]:
        matches: List[StatementMatch] = []
        for m in _ES_IMPORT_RE.finditer(text):
            name_list, specifier = self.split_import(m.group(0))
            matches.append(StatementMatch(
                line=document.line_of_offset(m.start()),
                offset=m.start(),
                module=specifier,
                names=self.resolve_import_names(name_list),
                is_external=not is_local_specifier(specifier),
                text=m.group(0),
            ))
        return matches

    @staticmethod
    def split_import(statement: str) -> Tuple[str, str]:
        """Split an ES import into its name clause and module specifier.

        The statement is cut at the first ``from``, so anything after the
        first quoted specifier (a second import, a trailing comment) is
        ignored.
        """
        parts = _ES_FROM_SPLIT.split(statement)
        head_parts = _ES_IMPORT_SPLIT.split(parts[0], maxsplit=1)
        name_list = head_parts[1] if len(head_parts) > 1 else ""
        tail = parts[1].strip() if len(parts) > 1 else ""
        quoted = _QUOTED_START.match(tail)
        specifier = quoted.group(2) if quoted else tail.lstrip("'\"")
        return name_list, specifier

    def _requires(self, document: Document, text: str) -> List[StatementMatch]:
        matches: List[StatementMatch] = []
        for m in _REQUIRE_RE.finditer(text):
            specifier = m.group(3)
            matches.append(StatementMatch(
                line=document.line_of_offset(m.start()),
                offset=m.start(),
                module=specifier,
                names=self.resolve_require_names(m.group(2)),
                is_external=not is_local_specifier(specifier),
                text=m.group(0),
            ))
        return matches

    @staticmethod
    def resolve_import_names(name_list: str) -> List[str]:
        """Names bound by the clause between ``import`` and ``from``.

        Handles ``Default``, ``* as ns``, ``{ a, b as c }`` and mixes of
        them.  Only one layer of braces is stripped.
        """
        names: List[str] = []
        for item in (i.strip() for i in _COMMA_SPLIT.split(name_list.strip())):
            if _AS_SPLIT.search(item) or "{" in item or "}" in item:
                split_by_as = _AS_SPLIT.split(item)
                name = split_by_as[1] if len(split_by_as) > 1 else item
                bracket_split = _OPEN_BRACE_SPLIT.split(name)
                bracket_name = bracket_split[1] if len(bracket_split) > 1 else bracket_split[0]
                name = _CLOSE_BRACE_SPLIT.split(bracket_name)[0]
            else:
                name = item
            name = name.strip()
            if name:
                names.append(name)
        return names

    @staticmethod
    def resolve_require_names(group: str) -> List[str]:
        if "," in group:
            candidates = _WHITESPACE.sub("", group).split(",")
        else:
            candidates = [group.strip()]
        return [name for name in candidates if name]


# ===================================================================
# Registry
# ===================================================================

_PYTHON = PythonStatementMatcher()
_SCRIPT = ScriptStatementMatcher()

MATCHERS: Dict[str, StatementMatcher] = {
    "python": _PYTHON,
    "javascript": _SCRIPT,
    "typescript": _SCRIPT,
}


def get_matcher(language_id: str) -> Optional[StatementMatcher]:
    """Return the matcher for *language_id*, or ``None`` for unsupported tags."""
    matcher = MATCHERS.get(language_id)
    if matcher is None:
        logger.debug("No statement matcher for language '%s'", language_id)
    return matcher
