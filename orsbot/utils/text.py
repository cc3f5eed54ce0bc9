"""
Text utilities for generated answers:
  - Markdown/markup sanitization (idempotent)
  - Removal of model-authored "sources" sections
  - Accent folding for locale-insensitive heading matching
  - Bounded previews for stage traces

All functions are pure (no I/O, no LLM).
"""

from __future__ import annotations

import re
import unicodedata


# ── Markup rules, applied in order ──────────────────────────────────
# Every rule only deletes ASCII markup characters, so each application
# either shortens the text or leaves it untouched.
_MARKUP_RULES: list[tuple[re.Pattern[str], str]] = [
    # Fenced code blocks: keep the body, drop the fences and language tag
    (re.compile(r"```[^\n`]*\n?(.*?)```", re.DOTALL), r"\1"),
    # Inline code spans
    (re.compile(r"`([^`\n]+)`"), r"\1"),
    # Images and links collapse to their text
    (re.compile(r"!?\[([^\]\n]*)\]\([^)\n]*\)"), r"\1"),
    # Bold; "__" only outside words so identifiers like __init__ survive
    (re.compile(r"\*\*(?=\S)(.+?)(?<=\S)\*\*"), r"\1"),
    (re.compile(r"(?<!\w)__(?=\S)(.+?)(?<=\S)__(?!\w)"), r"\1"),
    # Headings
    (re.compile(r"^[ \t]{0,3}#{1,6}[ \t]+", re.MULTILINE), ""),
    # Bullet markers (before italic so "* item" is not read as emphasis)
    (re.compile(r"^[ \t]*[-*+][ \t]+", re.MULTILINE), ""),
    # Numbered list markers: "1. " / "2) "
    (re.compile(r"^[ \t]*\d{1,3}[.)][ \t]+", re.MULTILINE), ""),
    # Italic
    (re.compile(r"\*(?=\S)([^*\n]+?)(?<=\S)\*"), r"\1"),
    # Trailing spaces, then runs of blank lines
    (re.compile(r"[ \t]+$", re.MULTILINE), ""),
    (re.compile(r"\n{3,}"), "\n\n"),
]

_REFERENCE_HEADING = re.compile(
    r"^(nguon tham khao|tai lieu tham khao|sources|references)\s*(\([^)]*\))?\s*:?$"
)


def _sanitize_once(text: str) -> str:
    for pattern, replacement in _MARKUP_RULES:
        text = pattern.sub(replacement, text)
    return text.strip()


def sanitize(text: str | None) -> str:
    """
    Strip markdown artifacts from generated text.

    Rules are re-applied until nothing changes, which makes the function
    idempotent: ``sanitize(sanitize(t)) == sanitize(t)``. Diacritics and
    other non-ASCII content are never touched.
    """
    if not text:
        return ""
    current = text.replace("\r\n", "\n").replace("\r", "\n")
    while True:
        cleaned = _sanitize_once(current)
        if cleaned == current:
            return cleaned
        current = cleaned


def strip_accents(text: str) -> str:
    """Fold Vietnamese (and other Latin) diacritics: "Nguồn" → "Nguon"."""
    decomposed = unicodedata.normalize("NFD", text)
    folded = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return folded.replace("đ", "d").replace("Đ", "D")


def is_reference_heading(line: str) -> bool:
    simplified = strip_accents(line).lower().strip()
    return bool(_REFERENCE_HEADING.match(simplified))


def strip_reference_section(text: str | None) -> str:
    """
    Drop a trailing reference section the model added on its own.

    Scans from the bottom for the last heading line meaning "sources"
    and returns everything above it. The reference formatter is the only
    place citations are rendered.
    """
    if not text:
        return ""
    lines = text.replace("\r\n", "\n").split("\n")
    for i in range(len(lines) - 1, -1, -1):
        if is_reference_heading(lines[i]):
            return "\n".join(lines[:i]).strip()
    return "\n".join(lines).strip()


def preview(text: str | None, limit: int = 200) -> str:
    """Bounded echo of ``text`` for traces and log lines."""
    if not text:
        return ""
    if len(text) <= limit:
        return text
    return text[:limit] + "..."
