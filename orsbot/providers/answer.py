"""
Answer-generation adapter (ANSWER stage) on the Gemini API.

Responsibilities:
  - Map conversation turns to Gemini contents (``assistant`` → ``model``)
  - Promote office/PDF attachments through the files API, concurrently
  - Inline images as bytes and the text family as labelled text parts
  - Translate upstream failures into the pipeline error taxonomy
"""

from __future__ import annotations

import asyncio
import base64
import io
import mimetypes
from typing import Any

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from orsbot.core.errors import (
    AuthError,
    ConfigurationError,
    NetworkError,
    PipelineError,
    RateLimitError,
    UpstreamError,
    ValidationError,
)
from orsbot.files.extraction import (
    ErrorContent,
    FileContentExtractor,
    ImageContent,
    MimeTypeExtractor,
    TableContent,
)
from orsbot.schemas.messages import (
    AttachmentDescriptor,
    ConversationMessage,
    FileDataPart,
    ImagePart,
    InlineDataPart,
    TextPart,
    UploadedFileHandle,
)
from orsbot.schemas.providers import AnswerResult
from orsbot.utils.logging import get_logger

logger = get_logger("orsbot.providers.answer")

_PROVIDER_ROLES = {"user": "user", "assistant": "model"}


def classify_answer_error(message: str, *, status: int | None = None) -> PipelineError:
    """Map an upstream error message onto the error taxonomy (case-insensitive)."""
    lowered = (message or "").lower()
    details = {"provider": "google", "status": status, "message": message}

    if "key" in lowered:
        return AuthError(
            "Invalid Google API key. Please check the server configuration.",
            details=details,
        )
    if "quota" in lowered or "limit" in lowered or "exhausted" in lowered:
        return RateLimitError(
            "Gemini quota exceeded. Please try again later or switch to another model.",
            details=details,
        )
    if "not found" in lowered or "not supported" in lowered:
        return ValidationError(
            "The selected model is not available. Please choose another model.",
            kind="unsupported_model",
            details=details,
        )
    return UpstreamError(
        f"Gemini API error: {message or 'unknown error'}",
        kind="generic_api_error",
        status_code=500,
        details=details,
    )


def _finish_reason(response: Any) -> str | None:
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return None
    reason = getattr(candidates[0], "finish_reason", None)
    if reason is None:
        return None
    return getattr(reason, "name", None) or str(reason)


def _usage(response: Any) -> dict[str, Any] | None:
    usage = getattr(response, "usage_metadata", None)
    if usage is None:
        return None
    if isinstance(usage, dict):
        return usage
    return usage.model_dump(exclude_none=True)


class GeminiAnswerAdapter:
    name = "google"

    def __init__(
        self,
        client: genai.Client | None,
        *,
        temperature: float = 0.7,
        max_output_tokens: int = 2000,
        timeout: float = 60.0,
        extractor: FileContentExtractor | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._client = client
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens
        self.timeout = timeout
        self.extractor = extractor or MimeTypeExtractor()
        self._http = http_client

    @property
    def configured(self) -> bool:
        return self._client is not None

    # ── Public API ───────────────────────────────────────────────────
    async def generate(
        self,
        model: str,
        messages: list[ConversationMessage],
        attachments: list[AttachmentDescriptor] | None = None,
        *,
        system_instruction: str | None = None,
    ) -> AnswerResult:
        if self._client is None:
            raise ConfigurationError(
                "Google API key is not configured.",
                details={"provider": self.name},
            )

        contents = [await self._to_content(message) for message in messages]
        extra_parts, uploaded = await self._prepare_attachments(attachments or [])
        if extra_parts and contents:
            last = contents[-1]
            contents[-1] = types.Content(role=last.role, parts=[*(last.parts or []), *extra_parts])

        config = types.GenerateContentConfig(
            system_instruction=system_instruction,
            temperature=self.temperature,
            max_output_tokens=self.max_output_tokens,
        )

        logger.info(
            "[GEMINI] Generating | model=%s | turns=%d | extra_parts=%d",
            model,
            len(contents),
            len(extra_parts),
        )
        try:
            response = await asyncio.wait_for(
                self._client.aio.models.generate_content(
                    model=model,
                    contents=contents,
                    config=config,
                ),
                timeout=self.timeout,
            )
        except genai_errors.APIError as exc:
            logger.error("[GEMINI] API error %s: %s", exc.code, exc.message)
            raise classify_answer_error(exc.message or str(exc), status=exc.code) from exc
        except asyncio.TimeoutError as exc:
            raise NetworkError(
                f"Gemini did not answer within {self.timeout:.0f}s.",
                details={"provider": self.name},
            ) from exc
        except httpx.HTTPError as exc:
            raise NetworkError(
                f"Could not reach Gemini: {exc}",
                details={"provider": self.name, "error": str(exc)},
            ) from exc

        text = (getattr(response, "text", None) or "").strip()
        finish_reason = _finish_reason(response)
        if not text:
            raise UpstreamError(
                "Gemini returned an empty response.",
                kind="empty_response",
                details={"provider": self.name, "finish_reason": finish_reason},
            )
        if (finish_reason or "").upper() == "MAX_TOKENS":
            logger.warning("[GEMINI] Answer truncated at max_output_tokens=%d", self.max_output_tokens)

        return AnswerResult(
            text=text,
            usage=_usage(response),
            finish_reason=finish_reason,
            uploaded_files=uploaded,
        )

    # ── Conversation mapping ────────────────────────────────────────
    async def _to_content(self, message: ConversationMessage) -> types.Content:
        role = _PROVIDER_ROLES[message.role]
        if isinstance(message.content, str):
            return types.Content(role=role, parts=[types.Part.from_text(text=message.content)])

        parts: list[types.Part] = []
        for part in message.content:
            if isinstance(part, TextPart):
                parts.append(types.Part.from_text(text=part.text))
            elif isinstance(part, InlineDataPart):
                try:
                    data = base64.b64decode(part.data)
                except ValueError as exc:
                    logger.warning("[GEMINI] Dropping inline %s part: %s", part.mime_type, exc)
                    continue
                parts.append(types.Part.from_bytes(data=data, mime_type=part.mime_type))
            elif isinstance(part, FileDataPart):
                parts.append(types.Part.from_uri(file_uri=part.file_uri, mime_type=part.mime_type))
            elif isinstance(part, ImagePart):
                image = await self._image_part(part.image_url.url)
                if image is not None:
                    parts.append(image)
        if not parts:
            parts.append(types.Part.from_text(text=""))
        return types.Content(role=role, parts=parts)

    async def _image_part(self, url: str) -> types.Part | None:
        if url.startswith("data:"):
            header, _, payload = url.partition(",")
            mime_type = header[5:].split(";")[0] or "image/png"
            try:
                data = base64.b64decode(payload)
            except ValueError as exc:
                logger.warning("[GEMINI] Dropping malformed %s data URL: %s", mime_type, exc)
                return None
            return types.Part.from_bytes(data=data, mime_type=mime_type)
        try:
            data, mime_type = await self._fetch(url)
        except httpx.HTTPError as exc:
            logger.warning("[GEMINI] Dropping image %s: %s", url, exc)
            return None
        return types.Part.from_bytes(data=data, mime_type=mime_type or "image/jpeg")

    async def _fetch(self, url: str) -> tuple[bytes, str | None]:
        if self._http is not None:
            response = await self._http.get(url, timeout=self.timeout)
        else:
            async with httpx.AsyncClient(follow_redirects=True) as client:
                response = await client.get(url, timeout=self.timeout)
        response.raise_for_status()
        content_type = response.headers.get("content-type", "").split(";")[0].strip()
        return response.content, content_type or mimetypes.guess_type(url)[0]

    # ── Attachments ─────────────────────────────────────────────────
    async def _prepare_attachments(
        self,
        attachments: list[AttachmentDescriptor],
    ) -> tuple[list[types.Part], list[UploadedFileHandle]]:
        """
        Resolve every attachment concurrently, then partition.

        A failed attachment is logged and dropped; it never fails the
        request.
        """
        if not attachments:
            return [], []

        outcomes = await asyncio.gather(
            *(self._prepare_one(attachment) for attachment in attachments),
            return_exceptions=True,
        )

        parts: list[types.Part] = []
        handles: list[UploadedFileHandle] = []
        for attachment, outcome in zip(attachments, outcomes):
            if isinstance(outcome, BaseException):
                if not isinstance(outcome, Exception):
                    raise outcome
                logger.warning("[GEMINI] Attachment %s dropped: %s", attachment.name, outcome)
                continue
            part, handle = outcome
            if part is not None:
                parts.append(part)
            if handle is not None:
                handles.append(handle)

        logger.info(
            "[GEMINI] Attachments | received=%d | used=%d | uploaded=%d",
            len(attachments),
            len(parts),
            len(handles),
        )
        return parts, handles

    async def _prepare_one(
        self,
        attachment: AttachmentDescriptor,
    ) -> tuple[types.Part | None, UploadedFileHandle | None]:
        if attachment.is_remote:
            data, fetched_type = await self._fetch(attachment.data)
            if attachment.type == "application/octet-stream" and fetched_type:
                attachment = attachment.model_copy(update={"type": fetched_type})
        else:
            data = attachment.decode()
        mime_type = attachment.mime_type

        if attachment.needs_upload:
            handle = await self._upload(attachment.name, mime_type, data)
            return types.Part.from_uri(file_uri=handle.remote_uri, mime_type=handle.mime_type), handle

        if attachment.is_image:
            return types.Part.from_bytes(data=data, mime_type=mime_type), None

        extracted = self.extractor.extract(attachment.name, mime_type, data)
        if isinstance(extracted, ErrorContent):
            logger.warning("[GEMINI] Attachment %s skipped: %s", attachment.name, extracted.message)
            return None, None
        if isinstance(extracted, ImageContent):
            return types.Part.from_bytes(data=extracted.data, mime_type=extracted.mime_type), None
        text = extracted.as_text() if isinstance(extracted, TableContent) else extracted.text
        return types.Part.from_text(text=f"[Tệp đính kèm: {attachment.name}]\n{text}"), None

    async def _upload(self, name: str, mime_type: str, data: bytes) -> UploadedFileHandle:
        uploaded = await self._client.aio.files.upload(
            file=io.BytesIO(data),
            config=types.UploadFileConfig(mime_type=mime_type, display_name=name),
        )
        if not uploaded.uri:
            raise UpstreamError(
                f"Upload of {name} returned no file URI.",
                details={"provider": self.name},
            )
        logger.info("[GEMINI] Uploaded %s → %s", name, uploaded.uri)
        return UploadedFileHandle(
            remote_uri=uploaded.uri,
            mime_type=uploaded.mime_type or mime_type,
            display_name=name,
        )
