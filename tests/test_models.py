"""Tests for the document model."""

from pathlib import Path

import pytest

from gratitude_cli.models import EngineResult, ImportBinding, Document, language_for_path


class TestDocument:
    def test_trailing_newline_adds_empty_line(self):
        """Test the empty line after a trailing newline."""
        doc = Document("a\nb\n")

        assert doc.line_count == 3
        assert doc.line_at(2) == ""

    def test_carriage_returns_are_not_part_of_lines(self):
        """Test stripping carriage returns."""
        doc = Document("import os\r\nos.sep\r\n", "python")
        assert doc.line_at(0) == "import os"

    def test_line_at_out_of_range(self):
        """Test reading a line out of range."""
        with pytest.raises(IndexError):
            Document("a").line_at(1)

    def test_line_of_offset(self):
        """Test mapping offsets to lines."""
        doc = Document("ab\ncd\n\nef")

        assert doc.line_of_offset(0) == 0
        assert doc.line_of_offset(2) == 0
        assert doc.line_of_offset(3) == 1
        assert doc.line_of_offset(6) == 2
        assert doc.line_of_offset(7) == 3
        assert doc.line_of_offset(100) == 3

    def test_from_path_detects_language(self, sample_files_path: Path):
        """Test language detection when loading a file."""
        assert Document.from_path(sample_files_path / "client.ts").language_id == "typescript"
        assert Document.from_path(sample_files_path / "notes.txt").language_id == "other"
        assert Document.from_path(sample_files_path / "notes.txt", "python").language_id == "python"


@pytest.mark.parametrize("name,expected", [
    ("a.py", "python"),
    ("a.JSX", "javascript"),
    ("a.mts", "typescript"),
    ("a.rb", "other"),
    ("Makefile", "other"),
])
def test_language_for_path(name, expected):
    """Test mapping file extensions to languages."""
    assert language_for_path(Path(name)) == expected


def test_engine_result_helpers():
    """Test the result helpers."""
    result = EngineResult(line_numbers={3, 1}, bindings=[ImportBinding("np", "numpy", 0)])

    assert result.sorted_lines() == [1, 3]
    assert result.bound_names == {"np"}
