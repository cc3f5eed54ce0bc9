"""
Provider registry: the adapters every request shares.

Clients are built once from settings and injected into the adapters.
An adapter whose credential is missing is still registered (with no
client) so the executor can report exactly which key is absent.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass

from google import genai
from google.genai import types
from openai import AsyncOpenAI

from orsbot.core.config import Settings, settings as default_settings
from orsbot.core.errors import ValidationError
from orsbot.providers.answer import GeminiAnswerAdapter
from orsbot.providers.rewrite import OpenAIRewriteAdapter
from orsbot.providers.search import PerplexitySearchAdapter, SearchAdapter, TavilySearchAdapter
from orsbot.utils.logging import get_logger

logger = get_logger("orsbot.services.providers")


@dataclass(frozen=True)
class ProviderRegistry:
    perplexity: SearchAdapter
    tavily: SearchAdapter
    rewrite: OpenAIRewriteAdapter
    answer: GeminiAnswerAdapter

    def search_adapter(self, provider: str | None) -> SearchAdapter:
        if provider == "perplexity":
            return self.perplexity
        if provider == "tavily":
            return self.tavily
        raise ValidationError(f"Unknown search provider: {provider}", details={"provider": provider})


def build_provider_registry(settings: Settings) -> ProviderRegistry:
    timeout = settings.provider_timeout_seconds

    openai_client = None
    if settings.openai_api_key:
        openai_client = AsyncOpenAI(api_key=settings.openai_api_key, timeout=timeout, max_retries=0)

    gemini_client = None
    if settings.google_api_key:
        gemini_client = genai.Client(
            api_key=settings.google_api_key,
            http_options=types.HttpOptions(timeout=int(timeout * 1000)),
        )

    registry = ProviderRegistry(
        perplexity=PerplexitySearchAdapter(
            settings.perplexity_api_key,
            model=settings.perplexity_model,
            base_url=settings.perplexity_base_url,
            timeout=timeout,
        ),
        tavily=TavilySearchAdapter(
            settings.tavily_api_key,
            base_url=settings.tavily_base_url,
            search_depth=settings.tavily_search_depth,
            max_results=settings.search_max_results,
            timeout=timeout,
        ),
        rewrite=OpenAIRewriteAdapter(openai_client, timeout=timeout),
        answer=GeminiAnswerAdapter(
            gemini_client,
            temperature=settings.answer_temperature,
            max_output_tokens=settings.answer_max_output_tokens,
            timeout=timeout,
        ),
    )
    logger.info(
        "Provider registry ready | google=%s | openai=%s | perplexity=%s | tavily=%s",
        registry.answer.configured,
        registry.rewrite.configured,
        registry.perplexity.configured,
        registry.tavily.configured,
    )
    return registry


# ── Singleton ───────────────────────────────────────────────────────
_registry_lock = threading.Lock()
_registry_instance: ProviderRegistry | None = None


def get_provider_registry() -> ProviderRegistry:
    """Process-wide registry, built on first use (FastAPI dependency)."""
    global _registry_instance
    if _registry_instance is not None:
        return _registry_instance

    with _registry_lock:
        if _registry_instance is None:
            _registry_instance = build_provider_registry(default_settings)
        return _registry_instance
