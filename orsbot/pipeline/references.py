"""
Rendering of the "Nguồn tham khảo" block appended to search-backed answers.
"""

from __future__ import annotations

from dataclasses import dataclass

from orsbot.prompts.constants import MISSING_URL, REFERENCES_EMPTY, REFERENCES_HEADER
from orsbot.schemas.messages import UploadedFileHandle
from orsbot.schemas.search import SearchResult


@dataclass(frozen=True)
class Citation:
    title: str
    location: str  # URL, provider file URI, or "" when unknown

    @classmethod
    def from_search_result(cls, result: SearchResult) -> "Citation":
        return cls(title=result.title, location=result.url)

    @classmethod
    def from_uploaded_file(cls, handle: UploadedFileHandle) -> "Citation":
        return cls(title=handle.display_name, location=handle.remote_uri)


def format_references(citations: list[Citation], max_count: int = 5) -> str:
    """
    Numbered ``{n}) {title} - {location}`` lines under a fixed header.

    Input order is kept and the list is cut at ``max_count``; an empty
    list renders the placeholder line.
    """
    shown = citations[:max_count] if max_count > 0 else []
    if not shown:
        return REFERENCES_EMPTY
    lines = [REFERENCES_HEADER]
    for index, citation in enumerate(shown, start=1):
        lines.append(f"{index}) {citation.title} - {citation.location or MISSING_URL}")
    return "\n".join(lines)
