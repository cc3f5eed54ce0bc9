"""
Shared fixtures: in-memory adapters that record their calls.
"""

from __future__ import annotations

from typing import Any

import pytest

from orsbot.core.config import Settings
from orsbot.core.errors import PipelineError
from orsbot.schemas.messages import ConversationMessage, UploadedFileHandle
from orsbot.schemas.providers import AnswerResult, RewriteResult
from orsbot.schemas.response import ChatRequest
from orsbot.schemas.search import SearchOutcome
from orsbot.services.providers import ProviderRegistry


class FakeSearchAdapter:
    def __init__(
        self,
        name: str,
        outcome: SearchOutcome | None = None,
        *,
        error: PipelineError | None = None,
        configured: bool = True,
    ):
        self.name = name
        self.outcome = outcome or SearchOutcome(provider=name)
        self.error = error
        self._configured = configured
        self.calls: list[str] = []

    @property
    def configured(self) -> bool:
        return self._configured

    async def search(self, query: str) -> SearchOutcome:
        self.calls.append(query)
        if self.error is not None:
            raise self.error
        return self.outcome


class FakeRewriteAdapter:
    name = "openai"

    def __init__(self, text: str | None = None, *, degraded: bool = False, configured: bool = True):
        self.text = text
        self.degraded = degraded
        self._configured = configured
        self.calls: list[dict[str, Any]] = []

    @property
    def configured(self) -> bool:
        return self._configured

    async def rewrite(self, text: str, **kwargs: Any) -> RewriteResult:
        self.calls.append({"text": text, **kwargs})
        if self.degraded:
            return RewriteResult(text=text, degraded=True, error="Request timed out.")
        return RewriteResult(text=self.text or f"Optimized: {text}")


class FakeAnswerAdapter:
    name = "google"

    def __init__(
        self,
        text: str = "Câu trả lời.",
        *,
        finish_reason: str = "STOP",
        uploaded_files: list[UploadedFileHandle] | None = None,
        error: PipelineError | None = None,
        configured: bool = True,
    ):
        self.text = text
        self.finish_reason = finish_reason
        self.uploaded_files = uploaded_files or []
        self.error = error
        self._configured = configured
        self.calls: list[dict[str, Any]] = []

    @property
    def configured(self) -> bool:
        return self._configured

    async def generate(self, model, messages, attachments=None, *, system_instruction=None) -> AnswerResult:
        self.calls.append({
            "model": model,
            "messages": messages,
            "attachments": attachments,
            "system_instruction": system_instruction,
        })
        if self.error is not None:
            raise self.error
        return AnswerResult(
            text=self.text,
            usage={"total_token_count": 42},
            finish_reason=self.finish_reason,
            uploaded_files=self.uploaded_files,
        )


def make_registry(
    *,
    perplexity: FakeSearchAdapter | None = None,
    tavily: FakeSearchAdapter | None = None,
    rewrite: FakeRewriteAdapter | None = None,
    answer: FakeAnswerAdapter | None = None,
) -> ProviderRegistry:
    return ProviderRegistry(
        perplexity=perplexity or FakeSearchAdapter("perplexity"),
        tavily=tavily or FakeSearchAdapter("tavily"),
        rewrite=rewrite or FakeRewriteAdapter(),
        answer=answer or FakeAnswerAdapter(),
    )


def chat_request(question: str = "Xin chào", *, workflow: str = "single", history=None, **kwargs) -> ChatRequest:
    messages = [*(history or []), ConversationMessage(role="user", content=question)]
    return ChatRequest(messages=messages, workflow=workflow, **kwargs)


@pytest.fixture
def test_settings() -> Settings:
    return Settings(_env_file=None, default_answer_model="gemini-2.5-flash", max_references=5)
