"""History node: line attribution through git blame."""

import re
from typing import Dict, List, Optional

from git import Repo
from git.exc import GitCommandError
from loguru import logger

from gitwhy.models.base import CommitRecord
from gitwhy.models.errors import ExtractionError, FailureReason
from gitwhy.models.state import PipelineStage, PipelineState

COMMIT_HEADER = re.compile(r"^[0-9a-f]{40}")

# Hash blame reports for lines that are not committed yet
UNCOMMITTED_HASH = "0" * 40


def _build_record(entry: Dict) -> CommitRecord:
    return CommitRecord(
        hash=entry["hash"],
        author=entry.get("author", ""),
        timestamp=entry.get("timestamp", 0),
        summary=entry.get("summary", ""),
    )


def parse_blame_output(output: str) -> List[CommitRecord]:
    """Parse ``git blame --line-porcelain`` output into unique commit records.

    Records keep the order in which blame first reports them, which is file-line
    order rather than chronological order.
    """
    entries = []
    current: Dict = {}

    for line in output.split("\n"):
        if COMMIT_HEADER.match(line):
            if current:
                entries.append(current)
            current = {"hash": line.split(" ")[0]}
        elif not current:
            continue
        elif line.startswith("author "):
            current["author"] = line[len("author ") :]
        elif line.startswith("author-time "):
            current["timestamp"] = int(line[len("author-time ") :])
        elif line.startswith("summary "):
            current["summary"] = line[len("summary ") :]

    if current:
        entries.append(current)

    records: List[CommitRecord] = []
    seen = set()
    for entry in entries:
        if entry["hash"] in seen:
            continue
        seen.add(entry["hash"])
        records.append(_build_record(entry))

    return records


def get_history(
    file_path: str,
    start_line: Optional[int] = None,
    end_line: Optional[int] = None,
    repo_path: Optional[str] = None,
) -> List[CommitRecord]:
    """Return the commits that last touched a file, a line or an inclusive range."""
    args = ["-w", "--line-porcelain"]
    if start_line is not None:
        line_range = f"{start_line},{end_line}" if end_line is not None else f"{start_line},{start_line}"
        args.extend(["-L", line_range])
    args.extend(["--", file_path])

    try:
        repo = Repo(repo_path or ".", search_parent_directories=True)
        output = repo.git.blame(*args)
    except GitCommandError as e:
        raise ExtractionError(
            FailureReason.EXTRACTION_FAILED,
            f"Failed to get git blame: {e.stderr.strip() if e.stderr else e}",
            file_path=file_path,
            line=start_line,
        ) from e

    records = [record for record in parse_blame_output(output) if record.hash != UNCOMMITTED_HASH]
    logger.debug(f"Blame attributed {file_path} to {len(records)} commits")
    return records


def history_node(state: PipelineState) -> PipelineState:
    """Collect the commits behind the resolved target."""
    if "target" not in state:
        raise ValueError("target is required in PipelineState")

    logger.info("Executing History Node")

    target = state["target"]
    commits = get_history(target.file_path, target.start_line, target.end_line, repo_path=state.get("repo_path"))

    if not commits:
        raise ExtractionError(
            FailureReason.NO_HISTORY,
            "No git history found for this code",
            file_path=target.file_path,
            line=target.start_line,
        )

    logger.info(f"Discovered {len(commits)} commits")

    return {"commits": commits, "stage": PipelineStage.EXTRACTING_HISTORY}
