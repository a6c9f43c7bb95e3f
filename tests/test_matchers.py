"""Tests for the language statement matchers."""

import pytest

from gratitude_cli.matchers import (
    MATCHERS,
    PythonStatementMatcher,
    ScriptStatementMatcher,
    get_matcher,
    is_local_specifier,
)
from gratitude_cli.models import Document


class TestRegistry:
    def test_languages_map_to_matchers(self):
        """Test the language registry."""
        assert isinstance(get_matcher("python"), PythonStatementMatcher)
        assert isinstance(get_matcher("javascript"), ScriptStatementMatcher)
        assert get_matcher("typescript") is get_matcher("javascript")

    def test_unknown_language(self):
        """Test looking up an unknown language."""
        assert get_matcher("other") is None
        assert get_matcher("ruby") is None

    def test_supports_language(self):
        """Test language support checks."""
        for language, matcher in MATCHERS.items():
            assert matcher.supports_language(language)
        assert not MATCHERS["python"].supports_language("typescript")


class TestPythonNames:
    @pytest.mark.parametrize("statement,names", [
        ("import os", ["os"]),
        ("import numpy as np", ["np"]),
        ("import os, sys", ["os", "sys"]),
        ("from foo import bar", ["bar"]),
        ("from foo import bar as b", ["b"]),
        ("from foo.sub import a, b as c", ["a", "c"]),
        ("from foo import import_helper", ["import_helper"]),
    ])
    def test_resolve_names(self, statement, names):
        """Test resolving Python bound names."""
        assert PythonStatementMatcher.resolve_names(statement) == names

    def test_recognize_statements(self):
        """Test recognizing Python statements."""
        doc = Document("x = 1\nfrom pkg.mod import thing\nimport os\n", "python")
        statements = PythonStatementMatcher().recognize_statements(doc)

        assert [s.line for s in statements] == [1, 2]
        assert statements[0].module == "pkg.mod"
        assert statements[0].names == ["thing"]
        assert statements[1].module == ""
        assert all(s.is_external for s in statements)

    def test_not_an_import(self):
        """Test lines that only mention import."""
        doc = Document("important = 1\nreimport(x)\n# see import docs\n", "python")
        assert PythonStatementMatcher().recognize_statements(doc) == []

    def test_list_statements(self):
        """Test listing Python statements."""
        text = "import os\n  from a import b\n"
        found = PythonStatementMatcher().list_statements(text)
        assert [s.strip() for s in found] == ["import os", "from a import b"]


class TestScriptNames:
    @pytest.mark.parametrize("clause,names", [
        ("React", ["React"]),
        ("* as vscode", ["vscode"]),
        ("{ useState }", ["useState"]),
        ("{ a, b }", ["a", "b"]),
        ("{ x as y }", ["y"]),
        ("React, { useState, useEffect as effect }", ["React", "useState", "effect"]),
        ("type { Config }", ["Config"]),
        ("{}", []),
    ])
    def test_resolve_import_names(self, clause, names):
        """Test resolving ES import names."""
        assert ScriptStatementMatcher.resolve_import_names(clause) == names

    @pytest.mark.parametrize("group,names", [
        ("path ", ["path"]),
        ("a, b ", ["a", "b"]),
        ("MongoClient,\n  ServerApiVersion", ["MongoClient", "ServerApiVersion"]),
        ("a, ", ["a"]),
    ])
    def test_resolve_require_names(self, group, names):
        """Test resolving require names."""
        assert ScriptStatementMatcher.resolve_require_names(group) == names

    def test_local_specifiers(self):
        """Test local specifier detection."""
        assert is_local_specifier("./x")
        assert is_local_specifier("/abs/x")
        assert not is_local_specifier("lodash")
        assert not is_local_specifier("@scope/pkg")
        # Only ./ and / count as local paths
        assert not is_local_specifier("../parent")

    @pytest.mark.parametrize("statement,expected", [
        ("import React from 'react';", ("React", "react")),
        ("import * as fs from \"fs\"", ("* as fs", "fs")),
        ("import a from './a'; import b from 'b'", ("a", "./a")),
        ("import chalk from 'chalk' // from \"docs\"", ("chalk", "chalk")),
    ])
    def test_split_import_stops_at_first_from(self, statement, expected):
        """Test splitting an ES import at its first from."""
        assert ScriptStatementMatcher.split_import(statement) == expected

    def test_local_import_followed_by_external_on_same_line(self):
        """Test a local import followed by a library import on one line."""
        doc = Document("import a from './a'; import b from 'b'\n", "typescript")
        statements = ScriptStatementMatcher().recognize_statements(doc)

        assert len(statements) == 1
        assert statements[0].module == "./a"
        assert statements[0].names == ["a"]
        assert statements[0].is_external is False

    def test_statements_are_ordered_and_flagged(self):
        """Test statement order and locality."""
        text = (
            "const fs = require('fs');\n"
            "import a from './a';\n"
            "import b from 'b';\n"
        )
        statements = ScriptStatementMatcher().recognize_statements(Document(text, "javascript"))

        assert [s.line for s in statements] == [0, 1, 2]
        assert [s.module for s in statements] == ["fs", "./a", "b"]
        assert [s.is_external for s in statements] == [True, False, True]

    def test_multiline_destructured_require(self):
        """Test a require spanning several lines."""
        text = "const {\n  a,\n  b\n} = require('pkg');\n"
        statements = ScriptStatementMatcher().recognize_statements(Document(text, "javascript"))

        assert len(statements) == 1
        assert statements[0].line == 0
        assert statements[0].names == ["a", "b"]

    def test_list_statements_counts_es_imports_only(self):
        """Test listing ES imports only."""
        text = (
            "import a from './a';\n"
            "import b from 'b';\n"
            "const c = require('c');\n"
        )
        assert ScriptStatementMatcher().list_statements(text) == ["./a", "b"]
