"""Tests for heuristic function location."""

from textwrap import dedent

import pytest

from gitwhy.models.errors import NotFoundError, ResolutionError
from gitwhy.nodes.function_locator import (
    ENCLOSING_LOOKBACK,
    FUNCTION_MATCHERS,
    find_definition_line,
    find_enclosing_boundary,
    find_enclosing_function,
)

SOURCE = dedent(
    """\
    import { thing } from "./thing";

    export async function fetchUser(id) {
      const url = `/users/${id}`;
      return thing(url);
    }

    const formatName = (user) => {
      return user.first + " " + user.last;
    };

    const handlers = {
      onClick: function (event) {
        event.preventDefault();
      },
    };
    """
)


@pytest.fixture
def source_file(tmp_path):
    path = tmp_path / "app.js"
    path.write_text(SOURCE)
    return path


def test_find_definition_line_function_keyword(hello_repo):
    _, test_file, _, _ = hello_repo
    assert find_definition_line(str(test_file), "hello") == 1


def test_find_definition_line_idioms(source_file):
    assert find_definition_line(str(source_file), "fetchUser") == 3
    assert find_definition_line(str(source_file), "formatName") == 8
    assert find_definition_line(str(source_file), "onClick") == 13


def test_find_definition_line_python_and_go(tmp_path):
    py_file = tmp_path / "tool.py"
    py_file.write_text("import os\n\n\ndef main(argv):\n    return 0\n")
    go_file = tmp_path / "server.go"
    go_file.write_text("package main\n\nfunc (s *Server) Serve(addr string) error {\n\treturn nil\n}\n")

    assert find_definition_line(str(py_file), "main") == 4
    assert find_definition_line(str(go_file), "Serve") == 3


def test_find_definition_line_does_not_match_prefix(tmp_path):
    path = tmp_path / "prefix.js"
    path.write_text("function helloWorld() {}\nfunction hello() {}\n")
    assert find_definition_line(str(path), "hello") == 2


def test_find_definition_line_not_found(hello_repo):
    _, test_file, _, _ = hello_repo
    with pytest.raises(NotFoundError) as exc_info:
        find_definition_line(str(test_file), "doesNotExist")

    assert isinstance(exc_info.value, ResolutionError)
    assert exc_info.value.function_name == "doesNotExist"
    assert "doesNotExist" in str(exc_info.value)
    assert str(test_file) in str(exc_info.value)


def test_find_definition_line_escapes_name(tmp_path):
    path = tmp_path / "dollar.js"
    path.write_text("function a$b() {}\n")
    with pytest.raises(NotFoundError):
        find_definition_line(str(path), "a.b")


def test_find_enclosing_boundary(source_file):
    assert find_enclosing_boundary(str(source_file), 3) == 6
    assert find_enclosing_boundary(str(source_file), 8) == 10


def test_find_enclosing_boundary_one_liner(tmp_path):
    path = tmp_path / "short.js"
    path.write_text("function one() { return 1; }\n")
    assert find_enclosing_boundary(str(path), 1) == 1


def test_find_enclosing_boundary_unresolved(tmp_path):
    unbalanced = tmp_path / "broken.js"
    unbalanced.write_text("function broken() {\n  if (x) {\n    return;\n}\n")
    python = tmp_path / "plain.py"
    python.write_text("def plain():\n    return 1\n")

    assert find_enclosing_boundary(str(unbalanced), 1) is None
    assert find_enclosing_boundary(str(python), 1) is None


def test_find_enclosing_boundary_never_before_start(source_file):
    for start in range(1, len(SOURCE.splitlines()) + 1):
        end = find_enclosing_boundary(str(source_file), start)
        assert end is None or end >= start


def test_find_enclosing_function(hello_repo, source_file):
    _, test_file, _, _ = hello_repo
    found = find_enclosing_function(str(test_file), 3)
    assert found.name == "hello"
    assert found.line == 1

    found = find_enclosing_function(str(source_file), 9)
    assert (found.name, found.line) == ("formatName", 8)


def test_find_enclosing_function_includes_target_line(source_file):
    found = find_enclosing_function(str(source_file), 3)
    assert (found.name, found.line) == ("fetchUser", 3)


def test_find_enclosing_function_none_above(source_file):
    assert find_enclosing_function(str(source_file), 1) is None


def test_find_enclosing_function_lookback_limit(tmp_path):
    body = ["  x += 1;"] * 70
    path = tmp_path / "long.js"
    path.write_text("\n".join(["function outer() {"] + body + ["}"]) + "\n")

    assert find_enclosing_function(str(path), 1 + ENCLOSING_LOOKBACK).name == "outer"
    assert find_enclosing_function(str(path), 2 + ENCLOSING_LOOKBACK) is None


def test_matchers_cover_each_language():
    languages = {matcher.language for matcher in FUNCTION_MATCHERS}
    assert {"javascript", "python", "go"} <= languages


def test_find_definition_line_counts_form_feed_as_text(tmp_path):
    path = tmp_path / "tool.py"
    path.write_text("\x0c\ndef hello():\n    return 0\n")

    assert find_definition_line(str(path), "hello") == 2
    assert find_enclosing_function(str(path), 3).line == 2


def test_find_definition_line_dollar_method_name(tmp_path):
    path = tmp_path / "widget.js"
    path.write_text("const widget = {\n$init: function () {\n  },\n  $render: async function () {},\n};\n")

    assert find_definition_line(str(path), "$init") == 2
    assert find_definition_line(str(path), "$render") == 4
    assert find_enclosing_function(str(path), 3).name == "$init"
