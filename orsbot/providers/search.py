"""
Web-search adapters (SEARCH stage).

Both adapters post JSON over httpx and return a normalized
SearchOutcome. Failures are raised as PipelineError subclasses; the
executor treats any of them as fatal for the request.
"""

from __future__ import annotations

import json
from typing import Any, Protocol

import httpx

from orsbot.core.errors import ConfigurationError, NetworkError, UpstreamError
from orsbot.providers.normalize import (
    collect_citation_candidates,
    extract_summary,
    normalize_citations,
)
from orsbot.schemas.search import SearchOutcome
from orsbot.utils.logging import get_logger
from orsbot.utils.text import preview

logger = get_logger("orsbot.providers.search")


PERPLEXITY_SYSTEM_PROMPT = (
    "You are a research assistant. Use the latest information you can find "
    "and cite clear sources."
)
PERPLEXITY_USER_TEMPLATE = (
    "Find the most recent information for the question below and return a "
    "concise summary with reliable sources.\n\nQUESTION: {query}"
)


class SearchAdapter(Protocol):
    name: str

    @property
    def configured(self) -> bool: ...

    async def search(self, query: str) -> SearchOutcome: ...


def _upstream_message(response: httpx.Response, fallback: str) -> str:
    """Best human-readable message from an error body (JSON or raw text)."""
    raw = response.text or ""
    try:
        body = json.loads(raw) if raw else None
    except ValueError:
        body = None
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str) and error:
            return error
        for key in ("message", "detail"):
            if body.get(key):
                return str(body[key])
    return raw.strip() or fallback


class _HttpSearchAdapter:
    """Shared transport for the JSON-over-HTTP search providers."""

    name = "search"

    def __init__(
        self,
        api_key: str | None,
        base_url: str,
        *,
        timeout: float = 60.0,
        client: httpx.AsyncClient | None = None,
    ):
        self.api_key = (api_key or "").strip() or None
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client

    @property
    def configured(self) -> bool:
        return self.api_key is not None

    def _require_key(self) -> str:
        if self.api_key is None:
            raise ConfigurationError(
                f"{self.name.capitalize()} API key is not configured.",
                details={"provider": self.name},
            )
        return self.api_key

    async def _send(self, client: httpx.AsyncClient, path: str, body: dict[str, Any]) -> httpx.Response:
        return await client.post(
            f"{self.base_url}{path}",
            json=body,
            headers={"Authorization": f"Bearer {self._require_key()}"},
            timeout=self.timeout,
        )

    async def _post_json(self, path: str, body: dict[str, Any]) -> dict[str, Any]:
        try:
            if self._client is not None:
                response = await self._send(self._client, path, body)
            else:
                async with httpx.AsyncClient() as client:
                    response = await self._send(client, path, body)
        except httpx.TimeoutException as exc:
            raise NetworkError(
                f"{self.name.capitalize()} search timed out after {self.timeout:.0f}s.",
                details={"provider": self.name, "error": str(exc)},
            ) from exc
        except httpx.HTTPError as exc:
            raise NetworkError(
                f"Could not reach {self.name.capitalize()}: {exc}",
                details={"provider": self.name, "error": str(exc)},
            ) from exc

        if response.status_code >= 400:
            message = _upstream_message(response, f"{self.name.capitalize()} API error")
            logger.error(
                "[%s] Search API error: %s %s",
                self.name.upper(),
                response.status_code,
                preview(message),
            )
            raise UpstreamError(
                f"{self.name.capitalize()} search failed ({response.status_code}): {message}",
                details={"provider": self.name, "status": response.status_code, "body": response.text},
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise UpstreamError(
                f"{self.name.capitalize()} returned a non-JSON response.",
                details={"provider": self.name, "body": response.text},
            ) from exc
        if not isinstance(payload, dict):
            raise UpstreamError(
                f"{self.name.capitalize()} returned an unexpected response shape.",
                details={"provider": self.name},
            )
        return payload

    def _outcome(self, payload: dict[str, Any]) -> SearchOutcome:
        outcome = SearchOutcome(
            provider=self.name,
            summary=extract_summary(payload),
            results=normalize_citations(collect_citation_candidates(payload)),
        )
        logger.info(
            "[%s] Search done | results=%d | summary=%s",
            self.name.upper(),
            len(outcome.results),
            bool(outcome.summary),
        )
        return outcome


class PerplexitySearchAdapter(_HttpSearchAdapter):
    """Perplexity chat-completions endpoint used as a cited search engine."""

    name = "perplexity"

    def __init__(
        self,
        api_key: str | None,
        *,
        model: str = "sonar-pro",
        base_url: str = "https://api.perplexity.ai",
        timeout: float = 60.0,
        client: httpx.AsyncClient | None = None,
    ):
        super().__init__(api_key, base_url, timeout=timeout, client=client)
        self.model = (model or "").strip() or "sonar-pro"

    async def search(self, query: str) -> SearchOutcome:
        self._require_key()
        logger.info("[PERPLEXITY] Searching for: %s", preview(query, 100))
        payload = await self._post_json(
            "/chat/completions",
            {
                "model": self.model,
                "messages": [
                    {"role": "system", "content": PERPLEXITY_SYSTEM_PROMPT},
                    {"role": "user", "content": PERPLEXITY_USER_TEMPLATE.format(query=query)},
                ],
                "temperature": 0.2,
                "top_p": 0.8,
                "top_k": 0,
                "stream": False,
            },
        )
        return self._outcome(payload)


class TavilySearchAdapter(_HttpSearchAdapter):
    """Tavily search API; ``answer`` is the summary, ``results`` the citations."""

    name = "tavily"

    def __init__(
        self,
        api_key: str | None,
        *,
        base_url: str = "https://api.tavily.com",
        search_depth: str = "basic",
        max_results: int = 10,
        timeout: float = 60.0,
        client: httpx.AsyncClient | None = None,
    ):
        super().__init__(api_key, base_url, timeout=timeout, client=client)
        self.search_depth = search_depth
        self.max_results = max_results

    async def search(self, query: str) -> SearchOutcome:
        self._require_key()
        logger.info("[TAVILY] Searching for: %s", preview(query, 100))
        payload = await self._post_json(
            "/search",
            {
                "query": query,
                "search_depth": self.search_depth,
                "include_answer": True,
                "max_results": self.max_results,
            },
        )
        return self._outcome(payload)
