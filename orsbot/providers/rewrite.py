"""
Prompt-rewrite adapter (REWRITE stage) on OpenAI chat completions.

The rewrite stage is an optimization, so this adapter never raises for
upstream trouble: any failure or empty completion hands the input back
with ``degraded=True``.
"""

from __future__ import annotations

from openai import AsyncOpenAI, OpenAIError

from orsbot.core.errors import ConfigurationError
from orsbot.schemas.providers import RewriteResult
from orsbot.utils.logging import get_logger

logger = get_logger("orsbot.providers.rewrite")


class OpenAIRewriteAdapter:
    name = "openai"

    def __init__(self, client: AsyncOpenAI | None, *, timeout: float = 60.0):
        self._client = client
        self.timeout = timeout

    @property
    def configured(self) -> bool:
        return self._client is not None

    async def rewrite(
        self,
        text: str,
        *,
        system_instruction: str,
        model: str = "gpt-4o-mini",
        temperature: float = 0.0,
        max_tokens: int = 400,
    ) -> RewriteResult:
        if self._client is None:
            raise ConfigurationError(
                "OpenAI API key is not configured.",
                details={"provider": self.name},
            )

        try:
            completion = await self._client.chat.completions.create(
                model=model,
                messages=[
                    {"role": "system", "content": system_instruction},
                    {"role": "user", "content": text},
                ],
                temperature=temperature,
                max_tokens=max_tokens,
                timeout=self.timeout,
            )
        except OpenAIError as exc:
            logger.warning("[OPENAI] Rewrite failed, passing input through: %s", exc)
            return RewriteResult(text=text, degraded=True, error=str(exc) or type(exc).__name__)

        content = ""
        if completion.choices:
            content = (completion.choices[0].message.content or "").strip()
        if not content:
            logger.warning("[OPENAI] Rewrite returned an empty completion, passing input through")
            return RewriteResult(text=text, degraded=True, error="empty completion")

        logger.info("[OPENAI] Rewrite done | model=%s | %d → %d chars", model, len(text), len(content))
        return RewriteResult(text=content)
