"""Base types used across the git-why pipeline."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional


@dataclass(frozen=True)
class CommitRecord:
    """A commit as seen through line attribution (blame)."""

    hash: str
    author: str = ""
    timestamp: int = 0  # seconds since epoch
    summary: str = ""

    @property
    def short_hash(self) -> str:
        return self.hash[:8]

    @property
    def date(self) -> datetime:
        return datetime.fromtimestamp(self.timestamp, tz=timezone.utc)


@dataclass(frozen=True)
class ChangedFile:
    """One entry of a commit's name-status listing."""

    status: str  # 'A', 'M', 'D', 'R100', ...
    path: str


@dataclass(frozen=True)
class CommitDetail(CommitRecord):
    """Full payload for one of the most relevant commits."""

    message: str = ""
    diff: str = ""
    files: List[ChangedFile] = field(default_factory=list)


@dataclass(frozen=True)
class EnclosingFunction:
    """Human label for a raw line target."""

    name: str
    line: int


@dataclass(frozen=True)
class Target:
    """A resolved analysis request.

    After resolution exactly one of these is active: the whole file (no start line),
    a single line (start line only) or an inclusive range (start and end line).
    """

    file_path: str
    start_line: Optional[int] = None
    end_line: Optional[int] = None
    function_name: Optional[str] = None

    @property
    def kind(self) -> str:
        if self.start_line is None:
            return "file"
        if self.end_line is None:
            return "line"
        return "range"

    def describe(self) -> str:
        """Short human description used in prompts and output."""
        if self.function_name:
            return f'function "{self.function_name}"'
        if self.kind == "range":
            return f"lines {self.start_line}-{self.end_line}"
        if self.kind == "line":
            return f"line {self.start_line}"
        return "this code"


@dataclass(frozen=True)
class CodeContext:
    """Source snippet around the target line."""

    code: str
    start_line: int
    target_line: int
    end_line: int


@dataclass
class AnalysisBundle:
    """Everything handed to the explanation collaborator."""

    file_path: str
    target: Target
    code_context: CodeContext
    commits: List[CommitDetail]
    enclosing_function: Optional[EnclosingFunction] = None
