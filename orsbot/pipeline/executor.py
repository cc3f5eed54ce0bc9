"""
Pipeline executor: top-level entry point for one chat request.

Resolves the workflow plan, validates the request, then runs
SEARCH → REWRITE → ANSWER (whichever the plan names) in order, each
stage feeding the next through the PipelineContext. Failures come back
as an error envelope carrying the trace of the stages that completed.
"""

from __future__ import annotations

from orsbot.core.config import Settings, settings as default_settings
from orsbot.core.errors import ConfigurationError, PipelineError, ValidationError
from orsbot.pipeline.references import Citation, format_references
from orsbot.pipeline.selector import WorkflowPlan, resolve_workflow
from orsbot.prompts.answer import ANSWER_SYSTEM_INSTRUCTION, build_answer_prompt
from orsbot.prompts.constants import is_answer_model
from orsbot.prompts.rewrite import (
    PROMPT_BUILDER_SYSTEM,
    RESEARCH_REFINER_SYSTEM,
    build_rewrite_input,
)
from orsbot.prompts.sections import format_conversation_context, format_search_data
from orsbot.schemas.pipeline import PipelineContext, PipelineStageResult, StageType
from orsbot.schemas.response import ChatRequest, ResponseEnvelope
from orsbot.schemas.providers import RewriteResult
from orsbot.services.providers import ProviderRegistry
from orsbot.utils.logging import get_logger
from orsbot.utils.text import preview, sanitize, strip_reference_section
from orsbot.utils.timing import Timer

logger = get_logger("orsbot.pipeline.executor")


class PipelineExecutor:
    def __init__(self, providers: ProviderRegistry, settings: Settings | None = None):
        self.providers = providers
        self.settings = settings or default_settings

    async def run(self, request: ChatRequest) -> ResponseEnvelope:
        """
        Execute the request's workflow and return the response envelope.

        Validation and configuration problems are reported before any
        provider is called. Exceptions that are not PipelineErrors
        propagate to the caller.
        """
        model = (request.model or self.settings.default_answer_model).strip()
        ctx: PipelineContext | None = None
        try:
            plan = resolve_workflow(request.workflow)
            ctx = self._build_context(plan, model, request)
            self._preflight(plan)
        except PipelineError as exc:
            logger.warning("[PIPELINE] Rejected | workflow=%s | %s: %s", request.workflow, exc.kind, exc.message)
            return ResponseEnvelope.from_error(
                exc,
                workflow=request.workflow,
                model=model,
                processing_time_seconds=ctx.elapsed_seconds if ctx else 0.0,
            )

        logger.info(
            "[PIPELINE] Started | workflow=%s | model=%s | question: %s",
            plan.workflow.value,
            model,
            preview(ctx.question, 80),
        )

        try:
            for stage in plan.stages:
                if stage == StageType.SEARCH:
                    await self._run_search(ctx, plan)
                elif stage == StageType.REWRITE:
                    await self._run_rewrite(ctx)
                else:
                    await self._run_answer(ctx)
        except PipelineError as exc:
            logger.error(
                "[PIPELINE] Halted after %d stage(s) | %s (%d): %s",
                len(ctx.trace),
                exc.kind,
                exc.status_code,
                exc.message,
            )
            if exc.details:
                logger.debug("[PIPELINE] Error details: %s", exc.details)
            return ResponseEnvelope.from_error(
                exc,
                workflow=plan.workflow.value,
                model=model,
                stage_trace=ctx.trace,
                search_results=ctx.search_outcome,
                processing_time_seconds=round(ctx.elapsed_seconds, 3),
            )

        answer_text = ctx.answer_text or ""
        if plan.has_search:
            answer_text = f"{answer_text}\n\n{self._references(ctx)}"

        logger.info(
            "[PIPELINE] Done in %.2fs | stages=%s",
            ctx.elapsed_seconds,
            ", ".join(f"{k}={v:.2f}s" for k, v in ctx.stage_timings.items()),
        )
        return ResponseEnvelope(
            workflow=plan.workflow.value,
            model=model,
            answer_text=answer_text,
            stage_trace=ctx.trace,
            search_results=ctx.search_outcome,
            usage=ctx.answer.usage if ctx.answer else None,
            finish_reason=ctx.answer.finish_reason if ctx.answer else None,
            processing_time_seconds=round(ctx.elapsed_seconds, 3),
        )

    # ── Validation ──────────────────────────────────────────────────
    def _build_context(self, plan: WorkflowPlan, model: str, request: ChatRequest) -> PipelineContext:
        if not is_answer_model(model):
            raise ValidationError(
                f"Model {model!r} cannot generate answers. Please choose a Gemini model.",
                kind="unsupported_model",
                details={"model": model},
            )

        messages = request.messages
        if not messages or messages[-1].role != "user":
            raise ValidationError(
                "The conversation must end with a user question.",
                kind="empty_question",
            )
        question = messages[-1].question_text().strip()
        if not question:
            raise ValidationError("The question is empty.", kind="empty_question")

        return PipelineContext(
            workflow=plan.workflow,
            model=model,
            messages=messages,
            attachments=request.files,
            question=question,
            conversation_context=format_conversation_context(
                messages[:-1],
                self.settings.context_max_messages,
            ),
        )

    def _preflight(self, plan: WorkflowPlan) -> None:
        """Every adapter the plan needs must have its credential."""
        needed = [self.providers.answer]
        if plan.has_search:
            needed.append(self.providers.search_adapter(plan.search_provider))
        if plan.has_rewrite:
            needed.append(self.providers.rewrite)

        for adapter in needed:
            if not adapter.configured:
                raise ConfigurationError(
                    f"{adapter.name.capitalize()} API key is not configured.",
                    details={"provider": adapter.name, "workflow": plan.workflow.value},
                )

    # ── Stages ──────────────────────────────────────────────────────
    async def _run_search(self, ctx: PipelineContext, plan: WorkflowPlan) -> None:
        adapter = self.providers.search_adapter(plan.search_provider)
        async with Timer("search", sink=ctx.stage_timings) as t:
            outcome = await adapter.search(ctx.question)
        ctx.search_outcome = outcome

        ctx.trace.append(
            PipelineStageResult(
                stage=StageType.SEARCH,
                input_preview=preview(ctx.question, self.settings.trace_preview_chars),
                output=outcome.summary or "",
                metadata={
                    "provider": outcome.provider,
                    "result_count": len(outcome.results),
                    "has_summary": bool(outcome.summary),
                    "duration_seconds": round(t.elapsed_s, 3),
                },
            )
        )
        logger.info(
            "[PIPELINE] SEARCH done (%.2fs) | provider=%s | results=%d",
            t.elapsed_s,
            outcome.provider,
            len(outcome.results),
        )

    async def _run_rewrite(self, ctx: PipelineContext) -> None:
        searched = ctx.search_outcome is not None
        rewrite_input = build_rewrite_input(
            ctx.question,
            conversation_context=ctx.conversation_context,
            search_data=format_search_data(ctx.search_outcome),
            searched=searched,
        )
        s = self.settings
        if searched:
            system, model, temperature, max_tokens = (
                RESEARCH_REFINER_SYSTEM,
                s.research_rewrite_model,
                s.research_rewrite_temperature,
                s.research_rewrite_max_tokens,
            )
        else:
            system, model, temperature, max_tokens = (
                PROMPT_BUILDER_SYSTEM,
                s.rewrite_model,
                s.rewrite_temperature,
                s.rewrite_max_tokens,
            )

        async with Timer("rewrite", sink=ctx.stage_timings) as t:
            try:
                result = await self.providers.rewrite.rewrite(
                    rewrite_input,
                    system_instruction=system,
                    model=model,
                    temperature=temperature,
                    max_tokens=max_tokens,
                )
            except PipelineError as exc:
                logger.warning("[PIPELINE] REWRITE failed, continuing with the original input: %s", exc.message)
                result = RewriteResult(text=rewrite_input, degraded=True, error=exc.message)

        # A degraded rewrite is only echoed in the trace; ANSWER builds its
        # prompt as if no rewrite had run.
        ctx.rewritten_prompt = None if result.degraded else result.text
        ctx.trace.append(
            PipelineStageResult(
                stage=StageType.REWRITE,
                input_preview=preview(rewrite_input, s.trace_preview_chars),
                output=result.text,
                metadata={
                    "model": model,
                    "prompt_length": len(result.text),
                    "degraded": result.degraded,
                    "error": result.error,
                    "duration_seconds": round(t.elapsed_s, 3),
                },
            )
        )
        logger.info("[PIPELINE] REWRITE done (%.2fs) | degraded=%s", t.elapsed_s, result.degraded)

    async def _run_answer(self, ctx: PipelineContext) -> None:
        prompt = build_answer_prompt(
            ctx.question,
            conversation_context=ctx.conversation_context,
            search_data=format_search_data(ctx.search_outcome),
            searched=ctx.search_outcome is not None,
            rewritten=ctx.rewritten_prompt,
        )
        messages = [*ctx.messages[:-1], ctx.messages[-1].with_text(prompt)]

        async with Timer("answer", sink=ctx.stage_timings) as t:
            result = await self.providers.answer.generate(
                ctx.model,
                messages,
                ctx.attachments,
                system_instruction=ANSWER_SYSTEM_INSTRUCTION,
            )
        ctx.answer = result

        cleaned = sanitize(result.text)
        ctx.answer_text = strip_reference_section(cleaned).strip() or cleaned

        ctx.trace.append(
            PipelineStageResult(
                stage=StageType.ANSWER,
                input_preview=preview(prompt, self.settings.trace_preview_chars),
                output=ctx.answer_text,
                metadata={
                    "model": ctx.model,
                    "prompt_length": len(prompt),
                    "finish_reason": result.finish_reason,
                    "truncated": result.truncated,
                    "uploaded_files": len(result.uploaded_files),
                    "duration_seconds": round(t.elapsed_s, 3),
                },
            )
        )
        logger.info(
            "[PIPELINE] ANSWER done (%.2fs) | finish_reason=%s | chars=%d",
            t.elapsed_s,
            result.finish_reason,
            len(ctx.answer_text),
        )

    def _references(self, ctx: PipelineContext) -> str:
        limit = self.settings.max_references
        citations: list[Citation] = []
        if ctx.search_outcome is not None:
            citations.extend(Citation.from_search_result(r) for r in ctx.search_outcome.display_results(limit))
        if ctx.answer is not None:
            citations.extend(Citation.from_uploaded_file(h) for h in ctx.answer.uploaded_files)
        return format_references(citations, limit)
