"""Explanation node: asks an LLM why the code exists."""

from typing import Any, Dict

from langchain_core.output_parsers import StrOutputParser
from langchain_core.prompts import PromptTemplate
from langchain_groq import ChatGroq
from loguru import logger

from gitwhy.config import ExplainerConfig
from gitwhy.models.base import AnalysisBundle, CommitDetail
from gitwhy.models.errors import CollaboratorError, FailureReason

# LLM prompt template
EXPLANATION_TEMPLATE = """
You are a code archaeologist analyzing git history to explain why code exists.

File: {file}
Target: {target}

Current code:
```
{code}
```

Git history (most recent attribution first):
{commit_info}

Explain WHY this code exists. Focus on:
1. What problem was it solving?
2. Why was this approach chosen?
3. What changed over time?
4. Any important context from the commits?

Be concise but insightful. Write like a developer explaining to another developer, not a formal report.
Format: 2-3 paragraphs, no bullet points unless listing multiple reasons.
"""


def truncate_diff(diff: str, limit: int) -> str:
    """Keep the first limit lines of a diff."""
    return "\n".join(diff.split("\n")[:limit])


def _format_commit(index: int, commit: CommitDetail, diff_line_limit: int) -> str:
    return (
        f"## Commit {index}: {commit.short_hash}\n"
        f"Author: {commit.author}\n"
        f"Date: {commit.date.strftime('%Y-%m-%d')}\n"
        f"Message: {commit.message}\n\n"
        f"Relevant changes:\n"
        f"```\n{truncate_diff(commit.diff, diff_line_limit)}\n```\n"
    )


def describe_target(bundle: AnalysisBundle) -> str:
    """Target label, naming the enclosing function of a raw line when known."""
    description = bundle.target.describe()
    enclosing = bundle.enclosing_function
    if enclosing and not bundle.target.function_name:
        description += f' (inside function "{enclosing.name}" at line {enclosing.line})'
    return description


def build_prompt_inputs(bundle: AnalysisBundle, diff_line_limit: int = 100) -> Dict[str, Any]:
    """Template variables for the explanation prompt."""
    commit_info = "\n".join(
        _format_commit(index, commit, diff_line_limit) for index, commit in enumerate(bundle.commits, start=1)
    )
    return {
        "file": bundle.file_path,
        "target": describe_target(bundle),
        "code": bundle.code_context.code,
        "commit_info": commit_info,
    }


def create_explainer(config: ExplainerConfig) -> Any:
    """Prompt, model and parser chained into one runnable."""
    if not config.api_key:
        raise CollaboratorError(
            FailureReason.MISSING_CREDENTIAL,
            "No API key found. Set the GROQ_API_KEY environment variable.\n"
            "Get your key at: https://console.groq.com/keys",
        )

    llm = ChatGroq(groq_api_key=config.api_key, model=config.model, max_tokens=config.max_tokens)
    return (
        PromptTemplate(template=EXPLANATION_TEMPLATE, input_variables=["file", "target", "code", "commit_info"])
        | llm
        | StrOutputParser()
    )


async def explain(bundle: AnalysisBundle, config: ExplainerConfig) -> str:
    """Generate the free-text explanation for a bundle."""
    explainer = create_explainer(config)
    logger.info("Executing Explanation Node")

    try:
        explanation = await explainer.ainvoke(build_prompt_inputs(bundle, config.diff_line_limit))
    except Exception as e:
        raise CollaboratorError(FailureReason.COLLABORATOR_FAILED, f"AI API call failed: {str(e)}") from e

    return explanation.strip()
