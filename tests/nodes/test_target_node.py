"""Tests for target resolution."""

import pytest

from gitwhy.models.errors import FailureReason, NotFoundError, ValidationError
from gitwhy.models.state import PipelineStage
from gitwhy.nodes.target_node import resolve_function_target, resolve_line_target, target_node


def test_resolve_function_target_with_braces(hello_repo):
    _, test_file, _, _ = hello_repo

    target = resolve_function_target(str(test_file), "hello")

    assert (target.start_line, target.end_line) == (1, 5)
    assert target.function_name == "hello"
    assert target.kind == "range"
    assert target.describe() == 'function "hello"'


def test_resolve_function_target_without_boundary(tmp_path):
    path = tmp_path / "tool.py"
    path.write_text("import sys\n\ndef run():\n    return sys.argv\n")

    target = resolve_function_target(str(path), "run")

    assert target.start_line == 3
    assert target.end_line is None
    assert target.kind == "line"


def test_resolve_function_target_one_liner(tmp_path):
    path = tmp_path / "short.js"
    path.write_text("// util\nfunction one() { return 1; }\n")

    target = resolve_function_target(str(path), "one")

    assert (target.start_line, target.end_line) == (2, None)


def test_resolve_line_target_bounds(hello_repo):
    _, test_file, _, _ = hello_repo

    assert resolve_line_target(str(test_file), 5, 2, None).kind == "line"
    assert resolve_line_target(str(test_file), 5, 2, 4).describe() == "lines 2-4"

    for start, end, reason in [
        (0, None, FailureReason.INVALID_LINE_NUMBER),
        (6, None, FailureReason.INVALID_LINE_NUMBER),
        (3, 3, FailureReason.INVALID_RANGE),
        (4, 2, FailureReason.INVALID_RANGE),
        (2, 9, FailureReason.INVALID_RANGE),
    ]:
        with pytest.raises(ValidationError) as exc_info:
            resolve_line_target(str(test_file), 5, start, end)
        assert exc_info.value.reason == reason


def test_target_node_whole_file(hello_repo):
    _, test_file, _, _ = hello_repo

    state = target_node({"file_path": str(test_file), "line_count": 5})

    assert state["target"].kind == "file"
    assert state["target"].describe() == "this code"
    assert state["enclosing_function"] is None
    assert state["stage"] == PipelineStage.RESOLVING_TARGET


def test_target_node_line_labels_enclosing_function(hello_repo):
    _, test_file, _, _ = hello_repo

    state = target_node({"file_path": str(test_file), "line_count": 5, "line_number": 3})

    assert state["target"].start_line == 3
    assert state["enclosing_function"].name == "hello"


def test_target_node_unknown_function(hello_repo):
    _, test_file, _, _ = hello_repo

    with pytest.raises(NotFoundError):
        target_node({"file_path": str(test_file), "line_count": 5, "function_name": "doesNotExist"})
