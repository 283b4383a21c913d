"""Configuration for the explanation model."""

import os
from typing import Optional

from pydantic import BaseModel, Field

DEFAULT_MODEL = "llama-3.1-8b-instant"


class ExplainerConfig(BaseModel):
    """Settings for the LLM that writes the explanation."""

    api_key: Optional[str] = Field(default=None, description="Groq API key")
    model: str = Field(default=DEFAULT_MODEL, description="Groq model name")
    max_tokens: int = Field(default=2048, description="Upper bound on generated tokens")
    diff_line_limit: int = Field(default=100, description="Diff lines sent per commit")

    @classmethod
    def from_env(cls, model: Optional[str] = None) -> "ExplainerConfig":
        """Build a config from GROQ_API_KEY and GITWHY_MODEL."""
        return cls(
            api_key=os.getenv("GROQ_API_KEY") or None,
            model=model or os.getenv("GITWHY_MODEL") or DEFAULT_MODEL,
        )
