"""
Schemas for the SEARCH stage output.

Every search provider, whatever its wire format, is normalized into a
SearchOutcome before the executor sees it.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class SearchResult(BaseModel):
    """One deduplicated citation."""
    title: str
    url: str = ""
    content: str = ""


class SearchOutcome(BaseModel):
    provider: str
    summary: str | None = None
    results: list[SearchResult] = Field(default_factory=list)

    @property
    def has_content(self) -> bool:
        """A summary alone counts, even with an empty result list."""
        return bool(self.summary) or bool(self.results)

    def display_results(self, limit: int) -> list[SearchResult]:
        """First ``limit`` results in provider order, for rendering."""
        return self.results[:limit]
