"""
PipelineContext carries state between the stages of one request.

Created once per request by the executor and progressively enriched by
each stage; never shared across requests.
"""

from __future__ import annotations

import time
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from orsbot.schemas.messages import AttachmentDescriptor, ConversationMessage
from orsbot.schemas.providers import AnswerResult
from orsbot.schemas.search import SearchOutcome


class StageType(str, Enum):
    SEARCH = "search"
    REWRITE = "rewrite"
    ANSWER = "answer"


class WorkflowId(str, Enum):
    SINGLE = "single"
    CHATGPT_TO_GEMINI = "chatgpt-to-gemini"
    TAVILY_TO_GEMINI = "tavily-to-gemini"
    PERPLEXITY_TO_GEMINI = "perplexity-to-gemini"
    PERPLEXITY_CHATGPT_GEMINI = "perplexity-chatgpt-gemini"


class PipelineStageResult(BaseModel):
    """Trace entry for one executed stage (UI transparency only)."""
    stage: StageType
    input_preview: str = ""
    output: str = ""
    metadata: dict[str, Any] = Field(default_factory=dict)


class PipelineContext(BaseModel):
    """Shared context threaded through the stages of one pipeline run."""

    # ── Inputs ───────────────────────────────────────────────────────
    workflow: WorkflowId
    model: str
    messages: list[ConversationMessage]
    attachments: list[AttachmentDescriptor] = Field(default_factory=list)

    # ── Derived from the last message ───────────────────────────────
    question: str = ""
    conversation_context: str = ""

    # ── Stage outputs (populated progressively) ─────────────────────
    search_outcome: SearchOutcome | None = None
    rewritten_prompt: str | None = None
    answer: AnswerResult | None = None
    answer_text: str | None = None
    trace: list[PipelineStageResult] = Field(default_factory=list)

    # ── Timing ──────────────────────────────────────────────────────
    start_time: float = Field(default_factory=time.time)
    stage_timings: dict[str, float] = Field(default_factory=dict)

    @property
    def elapsed_seconds(self) -> float:
        return time.time() - self.start_time
