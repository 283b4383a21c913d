"""Code context node: snippet around the target and the final bundle."""

from loguru import logger

from gitwhy.models.base import AnalysisBundle, CodeContext
from gitwhy.models.state import PipelineStage, PipelineState
from gitwhy.source import read_source_lines

DEFAULT_CONTEXT_RADIUS = 5


def get_code_context(file_path: str, target_line: int, radius: int = DEFAULT_CONTEXT_RADIUS) -> CodeContext:
    """Return the lines within radius of target_line, clipped to the file."""
    lines = read_source_lines(file_path)
    line_count = len(lines)
    radius = max(radius, 0)
    start = min(max(1, target_line - radius), max(line_count, 1))
    end = max(min(line_count, target_line + radius), start - 1)

    return CodeContext(
        code="\n".join(lines[start - 1 : end]),
        start_line=start,
        target_line=target_line,
        end_line=end,
    )


def context_node(state: PipelineState) -> PipelineState:
    """Build the code window and assemble the analysis bundle."""
    if "commit_details" not in state:
        raise ValueError("commit_details is required in PipelineState")

    logger.info("Executing Context Node")

    target = state["target"]
    code_context = get_code_context(target.file_path, target.start_line or 1)

    bundle = AnalysisBundle(
        file_path=target.file_path,
        target=target,
        code_context=code_context,
        commits=state["commit_details"],
        enclosing_function=state.get("enclosing_function"),
    )

    return {"code_context": code_context, "bundle": bundle, "stage": PipelineStage.READY}
