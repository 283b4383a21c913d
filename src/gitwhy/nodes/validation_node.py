"""Validation node: repository probing and request sanity checks."""

import os
from typing import Optional

from git import Repo
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError
from loguru import logger

from gitwhy.models.errors import FailureReason, ValidationError
from gitwhy.models.state import PipelineStage, PipelineState
from gitwhy.source import read_source_lines


def is_repository(path: str) -> bool:
    """Return True if path, or one of its ancestors, is a git working tree."""
    try:
        Repo(path, search_parent_directories=True)
        return True
    except (InvalidGitRepositoryError, NoSuchPathError, OSError):
        return False


def is_tracked(file_path: str, repo_path: Optional[str] = None) -> bool:
    """Return True if the file is registered in the repository index."""
    abs_path = os.path.abspath(file_path)
    try:
        repo = Repo(repo_path or os.path.dirname(abs_path), search_parent_directories=True)
        repo.git.ls_files("--error-unmatch", abs_path)
        return True
    except (InvalidGitRepositoryError, NoSuchPathError, GitCommandError, OSError):
        return False


def resolve_file_path(repo_path: str, file_path: str) -> str:
    """Resolve a possibly relative file path against the repository directory."""
    if os.path.isabs(file_path):
        return file_path
    return os.path.abspath(os.path.join(repo_path, file_path))


def count_lines(file_path: str) -> int:
    return len(read_source_lines(file_path))


def validation_node(state: PipelineState) -> PipelineState:
    """Check that the file exists and is tracked inside a repository."""
    if "file_path" not in state:
        raise ValueError("file_path is required in PipelineState")

    logger.info("Executing Validation Node")

    repo_path = state.get("repo_path") or "."
    requested = state["file_path"]
    file_path = resolve_file_path(repo_path, requested)

    if state.get("function_name") and state.get("line_number") is not None:
        raise ValidationError(
            FailureReason.INVALID_RANGE,
            "A function name cannot be combined with an explicit line or range",
            file_path=requested,
        )

    if not os.path.isfile(file_path):
        raise ValidationError(FailureReason.FILE_NOT_FOUND, f"File not found: {requested}", file_path=requested)

    if not is_repository(repo_path):
        raise ValidationError(
            FailureReason.NOT_A_REPOSITORY,
            "Not a git repository. Run git init first.",
            file_path=requested,
        )

    if not is_tracked(file_path, repo_path):
        raise ValidationError(FailureReason.NOT_TRACKED, f"File not tracked by git: {requested}", file_path=requested)

    line_count = count_lines(file_path)
    logger.debug(f"Validated {file_path} ({line_count} lines)")

    return {
        "repo_path": repo_path,
        "file_path": file_path,
        "line_count": line_count,
        "stage": PipelineStage.VALIDATING,
    }
