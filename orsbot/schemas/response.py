"""
External API schemas.

ChatRequest is what the front end posts; ResponseEnvelope is the single
shape returned for both success and failure. Exactly one of
``answer_text`` / ``error_kind`` is set.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from orsbot.core.errors import PipelineError
from orsbot.schemas.messages import AttachmentDescriptor, ConversationMessage
from orsbot.schemas.pipeline import PipelineStageResult
from orsbot.schemas.search import SearchOutcome


class ChatRequest(BaseModel):
    messages: list[ConversationMessage]
    model: str | None = None  # Falls back to settings.default_answer_model
    workflow: str = "single"  # Free-form so unknown ids get a structured 400
    files: list[AttachmentDescriptor] = Field(default_factory=list)


class ResponseEnvelope(BaseModel):
    workflow: str
    model: str | None = None
    answer_text: str | None = None
    stage_trace: list[PipelineStageResult] = Field(default_factory=list)
    search_results: SearchOutcome | None = None
    usage: dict[str, Any] | None = None
    finish_reason: str | None = None
    processing_time_seconds: float = 0.0

    # ── Failure fields ──────────────────────────────────────────────
    error_kind: str | None = None
    message: str | None = None
    remedy: str | None = None
    status_code: int = Field(default=200, exclude=True)

    @property
    def ok(self) -> bool:
        return self.error_kind is None

    @classmethod
    def from_error(
        cls,
        exc: PipelineError,
        *,
        workflow: str,
        model: str | None = None,
        stage_trace: list[PipelineStageResult] | None = None,
        search_results: SearchOutcome | None = None,
        processing_time_seconds: float = 0.0,
    ) -> "ResponseEnvelope":
        return cls(
            workflow=workflow,
            model=model,
            stage_trace=stage_trace or [],
            search_results=search_results,
            processing_time_seconds=processing_time_seconds,
            error_kind=exc.kind,
            message=exc.message,
            remedy=exc.remedy,
            status_code=exc.status_code,
        )


class WorkflowInfo(BaseModel):
    id: str
    stages: list[str]
    search_provider: str | None = None


class ModelInfo(BaseModel):
    id: str
    provider: str
    answer_capable: bool
