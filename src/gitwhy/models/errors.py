"""Error taxonomy for the git-why pipeline."""

from enum import Enum
from typing import Optional


class FailureReason(str, Enum):
    """Why a pipeline run ended in the failed state."""

    NOT_A_REPOSITORY = "not-a-repository"
    FILE_NOT_FOUND = "file-not-found"
    NOT_TRACKED = "not-tracked"
    INVALID_LINE_NUMBER = "invalid-line-number"
    INVALID_RANGE = "invalid-range"
    FUNCTION_NOT_FOUND = "function-not-found"
    EXTRACTION_FAILED = "extraction-failed"
    NO_HISTORY = "no-history"
    DETAIL_FETCH_ERROR = "detail-fetch-error"
    MISSING_CREDENTIAL = "missing-credential"
    COLLABORATOR_FAILED = "collaborator-failed"


class GitWhyError(Exception):
    """Base class for every error surfaced by git-why."""

    def __init__(
        self,
        reason: FailureReason,
        message: str,
        file_path: Optional[str] = None,
        line: Optional[int] = None,
    ):
        super().__init__(message)
        self.reason = reason
        self.message = message
        self.file_path = file_path
        self.line = line


class ValidationError(GitWhyError):
    """The request or the repository state is not usable."""


class ResolutionError(GitWhyError):
    """The target could not be mapped onto file lines."""


class NotFoundError(ResolutionError):
    """No line in the file declares the requested function."""

    def __init__(self, function_name: str, file_path: str):
        super().__init__(
            FailureReason.FUNCTION_NOT_FOUND,
            f'Function "{function_name}" not found in {file_path}',
            file_path=file_path,
        )
        self.function_name = function_name


class ExtractionError(GitWhyError):
    """Line attribution failed or produced no commits."""


class DetailFetchError(GitWhyError):
    """A commit object could not be resolved."""

    def __init__(self, commit_hash: str, message: str):
        super().__init__(FailureReason.DETAIL_FETCH_ERROR, message)
        self.commit_hash = commit_hash


class CollaboratorError(GitWhyError):
    """The explanation model could not be reached or failed."""
