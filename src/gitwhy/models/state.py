"""State management types for the git-why pipeline."""

from enum import Enum
from typing import List, Optional, TypedDict

from .base import AnalysisBundle, CodeContext, CommitDetail, CommitRecord, EnclosingFunction, Target


class PipelineStage(str, Enum):
    """Stages of a single pipeline run, in execution order."""

    VALIDATING = "validating"
    RESOLVING_TARGET = "resolving_target"
    EXTRACTING_HISTORY = "extracting_history"
    FETCHING_DETAILS = "fetching_details"
    BUILDING_CONTEXT = "building_context"
    READY = "ready"


class PipelineState(TypedDict, total=False):
    """State passed between pipeline nodes.

    Using TypedDict for LangGraph compatibility. total=False means all fields
    are optional; each node fills in its own outputs.
    """

    # Request
    repo_path: str
    file_path: str
    line_number: Optional[int]
    end_line: Optional[int]
    function_name: Optional[str]

    # Validation Node Output
    line_count: int

    # Target Node Output
    target: Target
    enclosing_function: Optional[EnclosingFunction]

    # History Node Output
    commits: List[CommitRecord]

    # Details Node Output
    commit_details: List[CommitDetail]

    # Context Node Output
    code_context: CodeContext
    bundle: AnalysisBundle

    # Last completed stage
    stage: PipelineStage
