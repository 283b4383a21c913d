"""Reading source files with git's line numbering."""

from typing import List


def read_source_lines(file_path: str) -> List[str]:
    """Split a file on newline characters only, the way git numbers lines.

    Form feeds, lone carriage returns and unicode separators stay inside their
    line. A trailing carriage return from CRLF endings is dropped.
    """
    with open(file_path, "r", encoding="utf-8", errors="replace", newline="") as f:
        lines = f.read().split("\n")

    if lines and lines[-1] == "":
        lines.pop()

    return [line[:-1] if line.endswith("\r") else line for line in lines]
