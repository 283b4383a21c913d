"""git-why workflow integration using LangGraph for orchestration."""

import argparse
import asyncio
import json
import re
import sys
from dataclasses import dataclass
from typing import List, Optional, Union

from dotenv import load_dotenv
from langgraph.graph import END, StateGraph
from loguru import logger

from gitwhy.config import ExplainerConfig
from gitwhy.models.base import AnalysisBundle
from gitwhy.models.errors import FailureReason, GitWhyError, ValidationError
from gitwhy.models.state import PipelineState
from gitwhy.nodes.code_context_node import context_node
from gitwhy.nodes.commit_details_node import details_node
from gitwhy.nodes.explanation_node import explain
from gitwhy.nodes.history_node import history_node
from gitwhy.nodes.renderer import OutputMode, format_output, to_dict
from gitwhy.nodes.target_node import target_node
from gitwhy.nodes.validation_node import validation_node

TARGET_LINES = re.compile(r"^(?P<start>\d+)(?:-(?P<end>\d+))?$")

HINTS = {
    FailureReason.NOT_A_REPOSITORY: "Run git-why from inside a git working tree, or pass --repo-path.",
    FailureReason.FILE_NOT_FOUND: "Check the path; it is resolved against the repository directory.",
    FailureReason.NOT_TRACKED: "Add and commit the file first: git add <file> && git commit.",
    FailureReason.INVALID_LINE_NUMBER: "Line numbers start at 1 and must exist in the file.",
    FailureReason.INVALID_RANGE: "Use path:start-end with start before end, and no --function.",
    FailureReason.FUNCTION_NOT_FOUND: "Check the spelling of the function name and the file.",
    FailureReason.EXTRACTION_FAILED: "git blame failed; check that the file exists at HEAD.",
    FailureReason.NO_HISTORY: "The code has no committed history yet.",
    FailureReason.DETAIL_FETCH_ERROR: "The commit object is missing; a shallow clone may need 'git fetch --unshallow'.",
    FailureReason.MISSING_CREDENTIAL: "Set GROQ_API_KEY in your environment or in a .env file.",
    FailureReason.COLLABORATOR_FAILED: "The model call failed; check your network and API key.",
}


@dataclass(frozen=True)
class TargetRequest:
    """One target as given on the command line."""

    file_path: str
    line_number: Optional[int] = None
    end_line: Optional[int] = None

    @property
    def label(self) -> str:
        if self.line_number is None:
            return self.file_path
        if self.end_line is None:
            return f"{self.file_path}:{self.line_number}"
        return f"{self.file_path}:{self.line_number}-{self.end_line}"


@dataclass
class TargetResult:
    """Outcome of one target in a (possibly batched) run."""

    label: str
    request: Optional[TargetRequest] = None
    bundle: Optional[AnalysisBundle] = None
    explanation: Optional[str] = None
    error: Optional[GitWhyError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        """JSON-ready view; failed targets carry their error instead of commits."""
        data = to_dict(self.bundle, self.explanation) if self.bundle is not None else {}
        data["target_spec"] = self.label
        data["error"] = (
            {"reason": self.error.reason.value, "message": self.error.message} if self.error is not None else None
        )
        return data


def parse_target_spec(text: str) -> TargetRequest:
    """Parse ``path``, ``path:line`` or ``path:start-end``."""
    if ":" not in text:
        return TargetRequest(file_path=text)

    file_path, _, suffix = text.rpartition(":")
    match = TARGET_LINES.match(suffix)
    if not match:
        reason = FailureReason.INVALID_RANGE if "-" in suffix else FailureReason.INVALID_LINE_NUMBER
        raise ValidationError(reason, f"Invalid line number: {suffix}", file_path=file_path)

    end = match.group("end")
    return TargetRequest(
        file_path=file_path,
        line_number=int(match.group("start")),
        end_line=int(end) if end is not None else None,
    )


def create_workflow() -> StateGraph:
    """Create the history-resolution graph."""
    workflow = StateGraph(PipelineState)

    # Add nodes
    workflow.add_node("validation_node", validation_node)
    workflow.add_node("target_node", target_node)
    workflow.add_node("history_node", history_node)
    workflow.add_node("details_node", details_node)
    workflow.add_node("context_node", context_node)

    workflow.set_entry_point("validation_node")

    # Define edges
    workflow.add_edge("validation_node", "target_node")
    workflow.add_edge("target_node", "history_node")
    workflow.add_edge("history_node", "details_node")
    workflow.add_edge("details_node", "context_node")
    workflow.add_edge("context_node", END)

    return workflow.compile()


def run_pipeline(
    file_path: str,
    line_number: Optional[int] = None,
    end_line: Optional[int] = None,
    function_name: Optional[str] = None,
    repo_path: str = ".",
) -> AnalysisBundle:
    """Resolve one target into an analysis bundle; errors propagate unchanged."""
    initial_state: PipelineState = {
        "repo_path": repo_path,
        "file_path": file_path,
        "line_number": line_number,
        "end_line": end_line,
        "function_name": function_name,
    }

    app = create_workflow()
    final_state = app.invoke(initial_state)
    return final_state["bundle"]


def analyze_targets(
    targets: List[Union[str, TargetRequest]],
    function_name: Optional[str] = None,
    repo_path: str = ".",
) -> List[TargetResult]:
    """Run each target through its own pipeline, one after another.

    Targets may be raw ``path[:line[-end]]`` strings, parsed one at a time. With
    several targets a failing target, malformed ones included, is recorded on its
    result and the rest still run; a single target lets its error propagate.
    """
    batch = len(targets) > 1
    results: List[TargetResult] = []

    for target in targets:
        label = target if isinstance(target, str) else target.label
        request = None
        try:
            request = parse_target_spec(target) if isinstance(target, str) else target
            bundle = run_pipeline(
                request.file_path,
                line_number=request.line_number,
                end_line=request.end_line,
                function_name=function_name,
                repo_path=repo_path,
            )
        except GitWhyError as e:
            if not batch:
                raise
            logger.debug(f"{label} failed: {e}")
            results.append(TargetResult(label=label, request=request, error=e))
            continue

        results.append(TargetResult(label=label, request=request, bundle=bundle))

    return results


async def run_workflow_async(
    targets: List[Union[str, TargetRequest]],
    config: ExplainerConfig,
    function_name: Optional[str] = None,
    repo_path: str = ".",
) -> List[TargetResult]:
    """Analyze targets and explain every bundle that was built."""
    results = analyze_targets(targets, function_name=function_name, repo_path=repo_path)
    batch = len(targets) > 1

    for result in results:
        if not result.ok:
            continue
        try:
            result.explanation = await explain(result.bundle, config)
        except GitWhyError as e:
            if not batch:
                raise
            logger.debug(f"{result.label} failed: {e}")
            result.error = e

    return results


def run_workflow(
    targets: List[Union[str, TargetRequest]],
    config: ExplainerConfig,
    function_name: Optional[str] = None,
    repo_path: str = ".",
) -> List[TargetResult]:
    """Synchronous wrapper for the async workflow."""
    return asyncio.run(run_workflow_async(targets, config, function_name=function_name, repo_path=repo_path))


def _report_error(error: GitWhyError, label: Optional[str] = None) -> None:
    prefix = f"{label}: " if label else ""
    logger.error(f"{prefix}{error.message}")
    hint = HINTS.get(error.reason)
    if hint:
        logger.error(f"Hint: {hint}")


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="gitwhy", description="AI-powered git history explainer")
    parser.add_argument("targets", nargs="+", help="file, file:line or file:start-end to analyze")
    parser.add_argument("-f", "--function", type=str, help="explain a specific function")
    parser.add_argument("-v", "--verbose", action="store_true", help="show detailed commit history")
    parser.add_argument("--json", action="store_true", help="output as JSON")
    parser.add_argument("--repo-path", type=str, help="Path to the Git repository", default=".")
    parser.add_argument("--model", type=str, help="LLM model to use", default=None)
    args = parser.parse_args(argv)

    if args.function and len(args.targets) > 1:
        parser.error("--function accepts a single file target")

    load_dotenv()

    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if args.verbose else "WARNING")

    mode = OutputMode.JSON if args.json else OutputMode.VERBOSE if args.verbose else OutputMode.BRIEF
    config = ExplainerConfig.from_env(model=args.model)

    try:
        results = run_workflow(args.targets, config, function_name=args.function, repo_path=args.repo_path)
    except GitWhyError as e:
        _report_error(e)
        return 1

    exit_code = 0 if all(result.ok for result in results) else 1
    for result in results:
        if not result.ok:
            _report_error(result.error, result.label)

    if mode == OutputMode.JSON and len(results) > 1:
        print(json.dumps([result.to_dict() for result in results], indent=2))
        return exit_code

    for result in results:
        if not result.ok:
            continue
        if len(results) > 1:
            print(f"==> {result.label}")
        print(format_output(result.bundle, result.explanation, mode))

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
