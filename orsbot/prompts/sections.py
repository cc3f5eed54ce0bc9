"""
Labelled text sections shared by the rewrite and answer prompts:
conversation context and search data.
"""

from __future__ import annotations

from orsbot.prompts.constants import (
    MISSING_URL,
    ROLE_LABELS,
    SEARCH_REFERENCES_LABEL,
    SEARCH_SUMMARY_LABEL,
)
from orsbot.schemas.messages import ConversationMessage
from orsbot.schemas.search import SearchOutcome


def format_conversation_context(
    previous: list[ConversationMessage],
    max_messages: int = 10,
) -> str:
    """
    Render earlier turns as speaker-labelled lines, oldest first.

    Only the last ``max_messages`` turns are kept; turns without any
    text (attachment-only) are skipped.
    """
    window = previous[-max_messages:] if max_messages > 0 else []
    lines = []
    for message in window:
        text = message.plain_text().strip()
        if not text:
            continue
        lines.append(f"{ROLE_LABELS.get(message.role, message.role)}: {text}")
    return "\n".join(lines)


def format_search_data(outcome: SearchOutcome | None) -> str:
    """
    Summary and the full (uncapped) result list, as labelled sections.

    Returns ``""`` when the search produced neither.
    """
    if outcome is None or not outcome.has_content:
        return ""

    sections = []
    if outcome.summary:
        sections.append(f"{SEARCH_SUMMARY_LABEL}\n{outcome.summary}")
    if outcome.results:
        entries = []
        for index, result in enumerate(outcome.results, start=1):
            entry = f"{index}. {result.title} - {result.url or MISSING_URL}"
            if result.content:
                entry += f"\n{result.content}"
            entries.append(entry)
        sections.append(f"{SEARCH_REFERENCES_LABEL}\n" + "\n".join(entries))
    return "\n\n".join(sections)
