"""Heuristic function location for several source languages.

Definitions are found with a set of regex matchers, one per declaration idiom.
Every matcher is a template containing a ``{name}`` placeholder: looking up a known
function substitutes the escaped name, while looking for the enclosing function of a
line substitutes a capturing identifier pattern. New idioms are added to
``FUNCTION_MATCHERS`` without touching the lookup functions.

The end of a function is found by brace balancing only. Braces inside strings,
comments or regex literals are counted like any other brace, so the boundary is
approximate; brace-less languages (Python) never resolve a boundary.
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Pattern

from gitwhy.models.base import EnclosingFunction
from gitwhy.models.errors import NotFoundError
from gitwhy.source import read_source_lines

# How far above a raw line target to look for a declaration. Tunable.
ENCLOSING_LOOKBACK = 50

IDENTIFIER = r"[A-Za-z_$][\w$]*"


@dataclass(frozen=True)
class FunctionMatcher:
    """A declaration idiom, parameterized by the function name."""

    language: str
    template: str

    def for_name(self, function_name: str) -> Pattern:
        return re.compile(self.template.replace("{name}", re.escape(function_name)))

    def for_any(self) -> Pattern:
        return re.compile(self.template.replace("{name}", f"(?P<name>{IDENTIFIER})"))


FUNCTION_MATCHERS: List[FunctionMatcher] = [
    # function hello(...), export async function hello(...), function* gen(...)
    FunctionMatcher("javascript", r"\bfunction\s*\*?\s+{name}\s*\("),
    # const hello = (...) => ..., const hello = async x => ..., const hello = function
    FunctionMatcher(
        "javascript",
        r"\b(?:const|let|var)\s+{name}\s*=\s*(?:async\s*)?(?:function\b|\(|" + IDENTIFIER + r"\s*=>)",
    ),
    # def hello(...)
    FunctionMatcher("python", r"\bdef\s+{name}\s*\("),
    # func hello(...), func (r *Recv) hello(...)
    FunctionMatcher("go", r"\bfunc\s+(?:\([^)]*\)\s*)?{name}\s*\("),
    # hello: function(...), hello: async function(...)
    FunctionMatcher("javascript", r"(?<![\w$]){name}\s*:\s*(?:async\s+)?function\b"),
]


def find_definition_line(file_path: str, function_name: str) -> int:
    """Return the 1-based line of the first declaration of function_name."""
    patterns = [matcher.for_name(function_name) for matcher in FUNCTION_MATCHERS]

    for line_number, text in enumerate(read_source_lines(file_path), start=1):
        if any(pattern.search(text) for pattern in patterns):
            return line_number

    raise NotFoundError(function_name, file_path)


def find_enclosing_boundary(file_path: str, start_line: int) -> Optional[int]:
    """Return the line closing the brace block opened at or after start_line.

    Returns None when the braces never balance before the end of the file; the
    caller then treats the definition line as the whole target.
    """
    lines = read_source_lines(file_path)
    depth = 0
    opened = False

    for line_number in range(max(start_line, 1), len(lines) + 1):
        for char in lines[line_number - 1]:
            if char == "{":
                depth += 1
                opened = True
            elif char == "}":
                depth -= 1
                if opened and depth == 0:
                    return line_number

    return None


def find_enclosing_function(file_path: str, line_number: int) -> Optional[EnclosingFunction]:
    """Find the nearest declaration at or above line_number.

    Gives up once ENCLOSING_LOOKBACK lines above the target have been scanned.
    """
    lines = read_source_lines(file_path)
    if not lines:
        return None

    patterns = [matcher.for_any() for matcher in FUNCTION_MATCHERS]
    first = min(line_number, len(lines))
    last = max(1, line_number - ENCLOSING_LOOKBACK)

    for current in range(first, last - 1, -1):
        text = lines[current - 1]
        for pattern in patterns:
            match = pattern.search(text)
            if match:
                return EnclosingFunction(name=match.group("name"), line=current)

    return None
