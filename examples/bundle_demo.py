#!/usr/bin/env python3
"""
examples/bundle_demo.py

Demonstrates the git-why history pipeline without calling a model: resolves a
target, then prints the commits and code window that would be sent for
explanation.
"""

import argparse
import os
import sys

from gitwhy.models.base import AnalysisBundle, CommitDetail
from gitwhy.models.errors import GitWhyError
from gitwhy.workflow import parse_target_spec, run_pipeline


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Show the analysis bundle git-why builds for a target")
    parser.add_argument("target", help="file, file:line or file:start-end")
    parser.add_argument("--function", type=str, help="Function name to resolve instead of a line")
    parser.add_argument(
        "--repo-path",
        type=str,
        default=os.getcwd(),
        help="Path to Git repository (default: current directory)",
    )
    return parser.parse_args()


def format_commit_detail(commit: CommitDetail) -> str:
    """Format a single commit's details for display."""
    files = "\n  - ".join(f"{f.status} {f.path}" for f in commit.files) or "No files changed"

    return f"""
Commit: {commit.short_hash}
Author: {commit.author}
Date: {commit.date.strftime('%Y-%m-%d %H:%M:%S')}
Files Changed ({len(commit.files)}):
  - {files}
Message: {commit.message}
Diff: {len(commit.diff.splitlines())} lines
{'=' * 80}
"""


def print_bundle(bundle: AnalysisBundle) -> None:
    context = bundle.code_context
    print(f"File: {bundle.file_path}")
    print(f"Target: {bundle.target.describe()}")
    if bundle.enclosing_function:
        print(f"Inside: {bundle.enclosing_function.name} (line {bundle.enclosing_function.line})")
    print(f"\nCode (lines {context.start_line}-{context.end_line}):")
    for offset, line in enumerate(context.code.splitlines()):
        number = context.start_line + offset
        marker = ">" if number == context.target_line else " "
        print(f"{marker}{number:5d} | {line}")

    print(f"\nRelevant commits ({len(bundle.commits)}):")
    for commit in bundle.commits:
        print(format_commit_detail(commit))


def main():
    args = parse_args()
    try:
        request = parse_target_spec(args.target)
        bundle = run_pipeline(
            request.file_path,
            line_number=request.line_number,
            end_line=request.end_line,
            function_name=args.function,
            repo_path=args.repo_path,
        )
    except GitWhyError as e:
        print(f"Error ({e.reason.value}): {e}", file=sys.stderr)
        sys.exit(1)

    print_bundle(bundle)


if __name__ == "__main__":
    main()
