"""Target node: turns the request into a concrete line or range."""

from typing import Optional

from loguru import logger

from gitwhy.models.base import Target
from gitwhy.models.errors import FailureReason, ValidationError
from gitwhy.models.state import PipelineStage, PipelineState
from gitwhy.nodes.function_locator import (
    find_definition_line,
    find_enclosing_boundary,
    find_enclosing_function,
)


def resolve_function_target(file_path: str, function_name: str) -> Target:
    """Locate a function and, where braces allow, the line that closes it."""
    start_line = find_definition_line(file_path, function_name)
    end_line = find_enclosing_boundary(file_path, start_line)

    if end_line is None:
        logger.debug(f"No closing brace found for {function_name}, using line {start_line} only")
    elif end_line == start_line:
        end_line = None

    return Target(file_path=file_path, start_line=start_line, end_line=end_line, function_name=function_name)


def resolve_line_target(file_path: str, line_count: int, start_line: int, end_line: Optional[int]) -> Target:
    """Validate an explicit line or range against the file."""
    if start_line < 1 or start_line > line_count:
        raise ValidationError(
            FailureReason.INVALID_LINE_NUMBER,
            f"Invalid line number {start_line}: {file_path} has {line_count} lines",
            file_path=file_path,
            line=start_line,
        )

    if end_line is not None:
        if end_line <= start_line:
            raise ValidationError(
                FailureReason.INVALID_RANGE,
                f"Invalid range {start_line}-{end_line}: start must be before end",
                file_path=file_path,
                line=start_line,
            )
        if end_line > line_count:
            raise ValidationError(
                FailureReason.INVALID_RANGE,
                f"Invalid range {start_line}-{end_line}: {file_path} has {line_count} lines",
                file_path=file_path,
                line=end_line,
            )

    return Target(file_path=file_path, start_line=start_line, end_line=end_line)


def target_node(state: PipelineState) -> PipelineState:
    """Resolve the analysis target from a function name, a line, a range or nothing."""
    if "line_count" not in state:
        raise ValueError("line_count is required in PipelineState")

    logger.info("Executing Target Node")

    file_path = state["file_path"]
    function_name = state.get("function_name")
    line_number = state.get("line_number")
    enclosing = None

    if function_name:
        target = resolve_function_target(file_path, function_name)
    elif line_number is not None:
        target = resolve_line_target(file_path, state["line_count"], line_number, state.get("end_line"))
        enclosing = find_enclosing_function(file_path, line_number)
    else:
        target = Target(file_path=file_path)

    logger.debug(f"Resolved target: {target.describe()} ({target.kind})")

    return {
        "target": target,
        "enclosing_function": enclosing,
        "stage": PipelineStage.RESOLVING_TARGET,
    }
