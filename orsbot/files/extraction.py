"""
File-content extraction collaborator.

The answer adapter asks an extractor what an attachment contains before
deciding how to hand it to the model. Office formats go through the
provider's upload API instead, so the default extractor only classifies
by MIME type and decodes the plain-text family itself.
"""

from __future__ import annotations

import csv
import io
import json
from typing import Any, Literal, Protocol, Union

from pydantic import BaseModel, Field


class TextContent(BaseModel):
    kind: Literal["text"] = "text"
    text: str
    metadata: dict[str, Any] = Field(default_factory=dict)


class TableContent(BaseModel):
    kind: Literal["table"] = "table"
    rows: list[list[str]]
    metadata: dict[str, Any] = Field(default_factory=dict)

    def as_text(self) -> str:
        return "\n".join(", ".join(row) for row in self.rows)


class ImageContent(BaseModel):
    kind: Literal["image"] = "image"
    mime_type: str
    data: bytes
    metadata: dict[str, Any] = Field(default_factory=dict)


class ErrorContent(BaseModel):
    kind: Literal["error"] = "error"
    message: str
    metadata: dict[str, Any] = Field(default_factory=dict)


ExtractedContent = Union[TextContent, TableContent, ImageContent, ErrorContent]


class FileContentExtractor(Protocol):
    def extract(self, name: str, mime_type: str, data: bytes) -> ExtractedContent: ...


_TEXT_SUFFIXES = (".txt", ".md", ".log")


class MimeTypeExtractor:
    """Classifies by MIME type (falling back to the file suffix)."""

    def extract(self, name: str, mime_type: str, data: bytes) -> ExtractedContent:
        mime_type = (mime_type or "").lower()
        lowered = name.lower()
        meta = {"name": name, "mime_type": mime_type, "size": len(data)}

        if mime_type.startswith("image/"):
            return ImageContent(mime_type=mime_type, data=data, metadata=meta)

        try:
            if mime_type == "text/csv" or lowered.endswith(".csv"):
                rows = [row for row in csv.reader(io.StringIO(data.decode("utf-8-sig"))) if row]
                return TableContent(rows=rows, metadata={**meta, "row_count": len(rows)})

            if mime_type == "application/json" or lowered.endswith(".json"):
                parsed = json.loads(data.decode("utf-8"))
                return TextContent(
                    text=json.dumps(parsed, ensure_ascii=False, indent=2),
                    metadata=meta,
                )

            if mime_type.startswith("text/") or lowered.endswith(_TEXT_SUFFIXES):
                return TextContent(text=data.decode("utf-8-sig"), metadata=meta)
        except (UnicodeDecodeError, ValueError, csv.Error) as exc:
            return ErrorContent(message=f"Could not read {name}: {exc}", metadata=meta)

        return ErrorContent(message=f"Unsupported file type: {mime_type or 'unknown'}", metadata=meta)
