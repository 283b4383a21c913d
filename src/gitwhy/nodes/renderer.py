"""Renderer for explanations and the commits behind them."""

import json
from enum import Enum
from typing import Any, Dict, List, Optional

from gitwhy.models.base import AnalysisBundle, CommitDetail

RULE = "─" * 60


class OutputMode(str, Enum):
    BRIEF = "brief"
    VERBOSE = "verbose"
    JSON = "json"


def _format_commits(commits: List[CommitDetail]) -> List[str]:
    """Format the analysed commits section."""
    content = [RULE, "Commits analyzed:", ""]
    for commit in commits:
        first_line = commit.message.split("\n")[0] if commit.message else ""
        content.append(f"{commit.short_hash} - {commit.date.strftime('%Y-%m-%d')}")
        content.append(f"  {commit.author}")
        content.append(f"  {commit.summary or first_line}")
        content.append("")  # Empty line between entries
    return content


def _format_enclosing(bundle: AnalysisBundle) -> List[str]:
    enclosing = bundle.enclosing_function
    if not enclosing or bundle.target.function_name:
        return []
    return [f'Inside function "{enclosing.name}" (line {enclosing.line})', ""]


def to_dict(bundle: AnalysisBundle, explanation: Optional[str]) -> Dict[str, Any]:
    """JSON-ready view of an explained bundle."""
    enclosing = bundle.enclosing_function
    return {
        "file": bundle.file_path,
        "target": bundle.target.describe(),
        "enclosing_function": {"name": enclosing.name, "line": enclosing.line} if enclosing else None,
        "explanation": explanation,
        "commits": [
            {
                "hash": c.hash,
                "author": c.author,
                "date": c.date.isoformat(),
                "message": c.message,
                "files": [{"status": f.status, "path": f.path} for f in c.files],
            }
            for c in bundle.commits
        ],
    }


def format_output(bundle: AnalysisBundle, explanation: str, mode: OutputMode = OutputMode.BRIEF) -> str:
    """Render an explanation for display."""
    if mode == OutputMode.JSON:
        return json.dumps(to_dict(bundle, explanation), indent=2)

    lines = ["", "Git History Explanation", RULE, "", explanation, ""]
    if mode == OutputMode.VERBOSE:
        lines.extend(_format_enclosing(bundle))
        lines.extend(_format_commits(bundle.commits))
    lines.extend([RULE, "Explained by git-why", ""])

    return "\n".join(lines)
