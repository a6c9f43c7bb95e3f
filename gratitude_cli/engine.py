"""Import/usage extraction engine.

``extract`` is a pure function of a document's text and language tag.  It
runs two passes over the whole document:

1. statement recognition through the language's
   :class:`~gratitude_cli.matchers.StatementMatcher`, collecting the lines of
   external import statements and the names they bind;
2. a usage scan testing every line for a call (``name(`` / ``name.attr(``)
   or, failing that, a member access (``name.attr``) of any bound name.

Nothing is cached between calls.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, List, Optional, Pattern, Set, Tuple

from .matchers import get_matcher
from .models import Document, EngineResult, ImportBinding

logger = logging.getLogger(__name__)


def build_usage_patterns(names: Iterable[str]) -> Tuple[Optional[Pattern[str]], Optional[Pattern[str]]]:
    """Compile the call and member-access predicates for *names*.

    Names are escaped, so bindings such as ``*`` or ``$`` cannot break the
    pattern.  ``\\b`` guards the left edge; the right edge is always ``(``
    or ``.``, so a longer identifier never matches a shorter name.
    """
    escaped = [re.escape(n) for n in sorted(set(names)) if n]
    if not escaped:
        return None, None
    call_pattern = re.compile(
        r"\b(?:" + "|".join(f"(?:(?:{n})\\.\\w+|{n})" for n in escaped) + r")\("
    )
    member_pattern = re.compile(
        r"\b(?:" + "|".join(f"(?:(?:{n})\\.\\w+)" for n in escaped) + r")"
    )
    return call_pattern, member_pattern


def find_usage_lines(document: Document, names: Iterable[str]) -> Set[int]:
    """Return the 0-based lines where any of *names* is called or accessed."""
    call_pattern, member_pattern = build_usage_patterns(names)
    lines: Set[int] = set()
    if call_pattern is None or member_pattern is None:
        return lines

    for line_number in range(document.line_count):
        line = document.line_at(line_number)
        if call_pattern.search(line):
            lines.add(line_number)
        elif member_pattern.search(line):
            lines.add(line_number)
    return lines


def extract(document: Document) -> EngineResult:
    """Find import lines and library-usage lines in *document*."""
    matcher = get_matcher(document.language_id)
    if matcher is None:
        return EngineResult()

    line_numbers: Set[int] = set()
    statement_lines: Set[int] = set()
    bindings: List[ImportBinding] = []

    for statement in matcher.recognize_statements(document):
        if not statement.is_external:
            logger.debug("Skipping local import of '%s' on line %d", statement.module, statement.line)
            continue
        statement_lines.add(statement.line)
        for name in statement.names:
            bindings.append(ImportBinding(
                bound_name=name,
                source_module=statement.module,
                line=statement.line,
            ))

    line_numbers.update(statement_lines)
    names = {b.bound_name for b in bindings}
    if names:
        line_numbers.update(find_usage_lines(document, names))

    logger.debug(
        "Extracted %d line(s) from %d statement(s), %d bound name(s)",
        len(line_numbers), len(statement_lines), len(names),
    )
    return EngineResult(
        line_numbers=line_numbers,
        has_any_import=len(line_numbers) > 0,
        bindings=bindings,
        statement_lines=statement_lines,
    )
