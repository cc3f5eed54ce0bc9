"""
Canonical results of the rewrite and answer adapters.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from orsbot.schemas.messages import UploadedFileHandle


class RewriteResult(BaseModel):
    text: str
    degraded: bool = False  # True when the input was passed through unchanged
    error: str | None = None


class AnswerResult(BaseModel):
    text: str
    usage: dict[str, Any] | None = None
    finish_reason: str | None = None
    uploaded_files: list[UploadedFileHandle] = Field(default_factory=list)

    @property
    def truncated(self) -> bool:
        return (self.finish_reason or "").upper() == "MAX_TOKENS"
