"""
OpenAI rewrite adapter: success path and every degradation path.
"""

import asyncio
from types import SimpleNamespace

import httpx
import openai
import pytest

from orsbot.core.errors import ConfigurationError
from orsbot.providers.rewrite import OpenAIRewriteAdapter

OPENAI_URL = "https://api.openai.com/v1/chat/completions"


class FakeCompletions:
    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.kwargs = None

    async def create(self, **kwargs):
        self.kwargs = kwargs
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def make_adapter(**kwargs):
    completions = FakeCompletions(**kwargs)
    client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return OpenAIRewriteAdapter(client, timeout=5.0), completions


def rewrite(adapter, text="Giá vàng hôm nay?"):
    return asyncio.run(adapter.rewrite(text, system_instruction="SYSTEM", model="gpt-4o-mini"))


def test_rewrite_returns_completion():
    adapter, completions = make_adapter(content="  Bạn là trợ lý AI...  ")
    result = rewrite(adapter)

    assert result.text == "Bạn là trợ lý AI..."
    assert not result.degraded
    assert completions.kwargs["messages"] == [
        {"role": "system", "content": "SYSTEM"},
        {"role": "user", "content": "Giá vàng hôm nay?"},
    ]
    assert completions.kwargs["timeout"] == 5.0


@pytest.mark.parametrize("error", [
    openai.APITimeoutError(request=httpx.Request("POST", OPENAI_URL)),
    openai.APIConnectionError(request=httpx.Request("POST", OPENAI_URL)),
    openai.RateLimitError(
        "Rate limit reached",
        response=httpx.Response(429, request=httpx.Request("POST", OPENAI_URL)),
        body=None,
    ),
])
def test_upstream_failure_degrades_to_input(error):
    adapter, _ = make_adapter(error=error)
    result = rewrite(adapter, "Câu hỏi gốc")

    assert result.degraded
    assert result.text == "Câu hỏi gốc"
    assert result.error


def test_empty_completion_degrades():
    adapter, _ = make_adapter(content="   ")
    result = rewrite(adapter, "Câu hỏi gốc")
    assert result.degraded
    assert result.text == "Câu hỏi gốc"


def test_unconfigured_adapter():
    adapter = OpenAIRewriteAdapter(None)
    assert not adapter.configured
    with pytest.raises(ConfigurationError):
        rewrite(adapter)
