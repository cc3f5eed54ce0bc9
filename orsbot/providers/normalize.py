"""
Shape sniffing for search-provider payloads.

Providers return summaries and citations in many places and shapes
(plain URL strings, objects with nested snippet/source fields, several
metadata locations). All of that is handled here so the adapters only
ever hand a SearchOutcome to the pipeline.
"""

from __future__ import annotations

import re
from typing import Any
from urllib.parse import urlparse

from orsbot.schemas.search import SearchResult


# Where citation candidates may live, in merge order. The first key of
# each path names the scope it is resolved against.
CITATION_PATHS: tuple[tuple[str, ...], ...] = (
    ("message", "citation_metadata", "citations"),
    ("choice", "metadata", "citations"),
    ("choice", "metadata", "sources"),
    ("choice", "metadata", "web_results"),
    ("payload", "metadata", "citations"),
    ("payload", "citations"),
    ("payload", "search_results"),
    ("payload", "sources"),
    ("payload", "web_results"),
    ("payload", "results"),
)

_TITLE_KEYS = ("title", "name", "source")
_URL_KEYS = ("url", "link", "source")
_CONTENT_KEYS = ("snippet", "text", "content", "summary")
_HOSTNAME = re.compile(r"^[\w-]+(\.[\w-]+)+$")


def _dig(value: Any, *keys: str) -> Any:
    for key in keys:
        if not isinstance(value, dict):
            return None
        value = value.get(key)
    return value


def _first_choice(payload: dict[str, Any]) -> dict[str, Any]:
    choices = payload.get("choices")
    if isinstance(choices, list) and choices and isinstance(choices[0], dict):
        return choices[0]
    return {}


def _looks_like_url(value: str) -> bool:
    return value.startswith(("http://", "https://", "www."))


def extract_text(value: Any) -> str:
    """Flatten a string, a list of parts, or a nested text/content/value object."""
    if not value:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        return "\n".join(t for t in (extract_text(item) for item in value) if t)
    if isinstance(value, dict):
        for key in ("text", "content", "value"):
            if value.get(key):
                return extract_text(value[key])
        if isinstance(value.get("parts"), list):
            return extract_text(value["parts"])
    return ""


def extract_summary(payload: dict[str, Any]) -> str | None:
    """
    Synthesized summary, looked up in order: first choice's message
    content, the choice's ``text``, top-level ``answer``, top-level
    ``output_text`` array.
    """
    choice = _first_choice(payload)
    summary = extract_text(_dig(choice, "message", "content"))
    if not summary and isinstance(choice.get("text"), str):
        summary = choice["text"]
    if not summary and isinstance(payload.get("answer"), str):
        summary = payload["answer"]
    if not summary and isinstance(payload.get("output_text"), list):
        summary = "\n".join(str(item) for item in payload["output_text"] if item)
    summary = (summary or "").strip()
    return summary or None


def collect_citation_candidates(payload: dict[str, Any]) -> list[Any]:
    """Merge every citation list found in the payload, in CITATION_PATHS order."""
    choice = _first_choice(payload)
    scopes = {
        "payload": payload,
        "choice": choice,
        "message": choice.get("message") if isinstance(choice.get("message"), dict) else {},
    }
    candidates: list[Any] = []
    for scope, *keys in CITATION_PATHS:
        group = _dig(scopes[scope], *keys)
        if isinstance(group, list):
            candidates.extend(group)
    return candidates


def derive_title(url: str, ordinal: int) -> str:
    """Hostname of ``url`` without ``www.``, else ``Source <ordinal>``."""
    if url:
        try:
            hostname = urlparse(url if "://" in url else f"https://{url}").hostname or ""
        except ValueError:
            hostname = ""
        if hostname.startswith("www."):
            hostname = hostname[4:]
        if _HOSTNAME.match(hostname):
            return hostname
    return f"Source {ordinal}"


def _first_string(candidate: dict[str, Any], keys: tuple[str, ...], *, urls: bool | None = None) -> str:
    for key in keys:
        value = candidate.get(key)
        if not isinstance(value, str) or not value.strip():
            continue
        value = value.strip()
        if urls is True and not _looks_like_url(value):
            continue
        if urls is False and _looks_like_url(value):
            continue
        return value
    return ""


def _parse_candidate(candidate: Any) -> tuple[str, str, str] | None:
    """(provided title, url, content) or None for unusable entries."""
    if isinstance(candidate, str):
        url = candidate.strip()
        return ("", url, "") if url else None
    if isinstance(candidate, dict):
        title = _first_string(candidate, _TITLE_KEYS, urls=False)
        url = _first_string(candidate, _URL_KEYS, urls=True)
        content = _first_string(candidate, _CONTENT_KEYS)
        if not (title or url or content):
            return None
        return title, url, content
    return None


def normalize_citations(candidates: list[Any]) -> list[SearchResult]:
    """
    Turn raw citation candidates into deduplicated SearchResults.

    Dedup key is ``url|title``, first-seen order is kept. A bare URL
    whose address is already listed is dropped; a titled entry for a URL
    first seen bare upgrades that entry's title in place.
    """
    results: list[SearchResult] = []
    seen: set[str] = set()
    untitled_at: dict[str, int] = {}

    for ordinal, candidate in enumerate(candidates, start=1):
        parsed = _parse_candidate(candidate)
        if parsed is None:
            continue
        provided_title, url, content = parsed

        if url and not provided_title and any(r.url == url for r in results):
            continue
        if url and provided_title and url in untitled_at:
            position = untitled_at.pop(url)
            existing = results[position]
            results[position] = existing.model_copy(
                update={"title": provided_title, "content": existing.content or content}
            )
            seen.add(f"{url}|{provided_title}")
            continue

        title = provided_title or derive_title(url, ordinal)
        key = f"{url}|{title}"
        if key in seen:
            continue
        seen.add(key)
        if url and not provided_title:
            untitled_at[url] = len(results)
        results.append(SearchResult(title=title, url=url, content=content))

    return results
