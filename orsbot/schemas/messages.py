"""
Conversation and attachment schemas.

Message content is either a plain string or a list of tagged parts,
discriminated on ``type`` so every consumer can match on the part kind
instead of probing dict keys.
"""

from __future__ import annotations

import base64
import re
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field


# ── Content parts ────────────────────────────────────────────────────
class TextPart(BaseModel):
    type: Literal["text"] = "text"
    text: str


class ImageUrl(BaseModel):
    url: str  # data:<mime>;base64,<payload> or http(s) URL


class ImagePart(BaseModel):
    type: Literal["image_url"] = "image_url"
    image_url: ImageUrl


class InlineDataPart(BaseModel):
    """Binary payload carried inline (base64)."""
    type: Literal["inline_data"] = "inline_data"
    mime_type: str
    data: str


class FileDataPart(BaseModel):
    """Reference to a file already materialized on the provider side."""
    type: Literal["file_data"] = "file_data"
    file_uri: str
    mime_type: str


ContentPart = Annotated[
    Union[TextPart, ImagePart, InlineDataPart, FileDataPart],
    Field(discriminator="type"),
]


class ConversationMessage(BaseModel):
    """One turn of the conversation. Oldest first; the last one is answered."""

    role: Literal["user", "assistant"]
    content: Union[str, list[ContentPart]]

    class Config:
        frozen = True

    def question_text(self) -> str:
        """String content, or the first text part, or ``""``."""
        if isinstance(self.content, str):
            return self.content
        for part in self.content:
            if isinstance(part, TextPart):
                return part.text
        return ""

    def plain_text(self) -> str:
        """All text carried by the message, parts joined by newlines."""
        if isinstance(self.content, str):
            return self.content
        return "\n".join(p.text for p in self.content if isinstance(p, TextPart) and p.text)

    def non_text_parts(self) -> list[ContentPart]:
        if isinstance(self.content, str):
            return []
        return [p for p in self.content if not isinstance(p, TextPart)]

    def with_text(self, text: str) -> "ConversationMessage":
        """
        Copy of this message whose text is replaced by ``text``.

        Image and file parts of mixed content are carried over after the
        new text part.
        """
        extra = self.non_text_parts()
        if not extra:
            return self.model_copy(update={"content": text})
        return self.model_copy(update={"content": [TextPart(text=text), *extra]})


# ── Attachments ──────────────────────────────────────────────────────
# Office documents and PDFs go through the provider's file upload API.
UPLOAD_MIME_TYPES: frozenset[str] = frozenset({
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/vnd.ms-excel",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "application/vnd.openxmlformats-officedocument.presentationml.presentation",
})

_DATA_URL_PREFIX = re.compile(r"^data:[^;,]*;base64,")


class AttachmentDescriptor(BaseModel):
    """A file submitted with the request (never persisted)."""

    name: str
    type: str = "application/octet-stream"  # MIME type, as sent by the client
    data: str  # base64 payload or http(s) URL

    @property
    def mime_type(self) -> str:
        return self.type or "application/octet-stream"

    @property
    def needs_upload(self) -> bool:
        return self.mime_type in UPLOAD_MIME_TYPES

    @property
    def is_image(self) -> bool:
        return self.mime_type.startswith("image/")

    @property
    def is_remote(self) -> bool:
        return self.data.startswith(("http://", "https://"))

    def decode(self) -> bytes:
        """Raw bytes of an inline payload (a ``data:`` prefix is tolerated)."""
        return base64.b64decode(_DATA_URL_PREFIX.sub("", self.data.strip()))


class UploadedFileHandle(BaseModel):
    """Provider-side handle for an attachment promoted through upload."""
    remote_uri: str
    mime_type: str
    display_name: str
