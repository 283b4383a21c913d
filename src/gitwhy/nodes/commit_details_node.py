"""Commit details node: full message, diff and changed files per commit."""

from typing import List, Optional

from git import Repo
from git.exc import BadName, BadObject, GitCommandError
from loguru import logger

from gitwhy.models.base import ChangedFile, CommitDetail, CommitRecord
from gitwhy.models.errors import DetailFetchError
from gitwhy.models.state import PipelineStage, PipelineState

MAX_RELEVANT_COMMITS = 5


def parse_name_status(output: str) -> List[ChangedFile]:
    """Parse ``--name-status`` lines such as ``M\\tsrc/app.py`` or ``R100\\told\\tnew``."""
    files = []
    for line in output.splitlines():
        parts = line.strip().split("\t")
        if len(parts) < 2:
            continue
        files.append(ChangedFile(status=parts[0], path=parts[-1]))
    return files


def get_details(commit_hash: str, repo_path: Optional[str] = None) -> CommitDetail:
    """Fetch the full commit for a hash; nothing is cached between calls."""
    try:
        repo = Repo(repo_path or ".", search_parent_directories=True)
        diff = repo.git.show(commit_hash)
        name_status = repo.git.show("--name-status", "--format=", commit_hash)
        commit = repo.commit(commit_hash)

        return CommitDetail(
            hash=commit.hexsha,
            author=commit.author.name,
            timestamp=commit.authored_date,
            summary=commit.summary,
            message=commit.message.strip(),
            diff=diff,
            files=parse_name_status(name_status),
        )
    except (GitCommandError, BadName, BadObject, ValueError) as e:
        raise DetailFetchError(commit_hash, f"Failed to get commit details for {commit_hash}: {e}") from e


def select_relevant(commits: List[CommitRecord]) -> List[CommitRecord]:
    """Keep the first commits in blame order."""
    return commits[:MAX_RELEVANT_COMMITS]


def details_node(state: PipelineState) -> PipelineState:
    """Fetch details for the most relevant commits, sequentially."""
    if "commits" not in state:
        raise ValueError("commits is required in PipelineState")

    logger.info("Executing Details Node")

    details: List[CommitDetail] = []
    for record in select_relevant(state["commits"]):
        logger.debug(f"Fetching commit: {record.short_hash} - {record.summary}")
        details.append(get_details(record.hash, repo_path=state.get("repo_path")))

    return {"commit_details": details, "stage": PipelineStage.FETCHING_DETAILS}
