"""Tests for output rendering."""

import json

from gitwhy.models.base import AnalysisBundle, ChangedFile, CodeContext, CommitDetail, EnclosingFunction, Target
from gitwhy.nodes.renderer import OutputMode, format_output


def make_bundle():
    commit = CommitDetail(
        hash="abcdef0123456789abcdef0123456789abcdef01",
        author="Test User",
        timestamp=1700000000,
        summary="Add null safety check",
        message="Add null safety check\n\nPrevents crash.",
        diff="diff --git a/test.js b/test.js",
        files=[ChangedFile(status="M", path="test.js")],
    )
    return AnalysisBundle(
        file_path="test.js",
        target=Target(file_path="test.js", start_line=1, end_line=5, function_name="hello"),
        code_context=CodeContext(code="function hello() {", start_line=1, target_line=1, end_line=1),
        commits=[commit],
    )


def test_brief_output():
    output = format_output(make_bundle(), "Because of null globals.")

    assert "Because of null globals." in output
    assert "Explained by git-why" in output
    assert "Commits analyzed" not in output


def test_verbose_output_lists_commits():
    output = format_output(make_bundle(), "Because.", OutputMode.VERBOSE)

    assert "Commits analyzed:" in output
    assert "abcdef01 - 2023-11-14" in output
    assert "  Test User" in output
    assert "  Add null safety check" in output


def test_json_output():
    data = json.loads(format_output(make_bundle(), "Because.", OutputMode.JSON))

    assert data["explanation"] == "Because."
    assert data["target"] == 'function "hello"'
    assert data["commits"][0]["hash"] == "abcdef0123456789abcdef0123456789abcdef01"
    assert data["commits"][0]["date"].startswith("2023-11-14T")
    assert data["commits"][0]["files"] == [{"status": "M", "path": "test.js"}]


def make_line_bundle():
    bundle = make_bundle()
    bundle.target = Target(file_path="test.js", start_line=3)
    bundle.enclosing_function = EnclosingFunction(name="hello", line=1)
    return bundle


def test_verbose_output_names_enclosing_function():
    output = format_output(make_line_bundle(), "Because.", OutputMode.VERBOSE)

    assert 'Inside function "hello" (line 1)' in output


def test_json_output_includes_enclosing_function():
    data = json.loads(format_output(make_line_bundle(), "Because.", OutputMode.JSON))

    assert data["enclosing_function"] == {"name": "hello", "line": 1}
    assert json.loads(format_output(make_bundle(), "Because.", OutputMode.JSON))["enclosing_function"] is None
