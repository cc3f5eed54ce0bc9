"""
Thin API routes for chat and catalog lookups.

No business logic: validates the body, hands it to the executor, and
turns the envelope into a response with the right status code.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from orsbot.core.errors import PipelineError
from orsbot.pipeline.executor import PipelineExecutor
from orsbot.pipeline.selector import list_workflows
from orsbot.prompts.constants import MODEL_CATALOG, is_answer_model
from orsbot.schemas.response import ChatRequest, ModelInfo, ResponseEnvelope, WorkflowInfo
from orsbot.services.providers import ProviderRegistry, get_provider_registry
from orsbot.utils.logging import get_logger

logger = get_logger("orsbot.api.chat")

router = APIRouter(tags=["Chat"])


def get_executor(providers: ProviderRegistry = Depends(get_provider_registry)) -> PipelineExecutor:
    return PipelineExecutor(providers)


@router.post("/chat", response_model=ResponseEnvelope)
async def chat(request: ChatRequest, executor: PipelineExecutor = Depends(get_executor)):
    """Answer the last user message with the requested workflow."""
    logger.info(
        "[CHAT] New request | workflow=%s | model=%s | messages=%d | files=%d",
        request.workflow,
        request.model,
        len(request.messages),
        len(request.files),
    )
    try:
        envelope = await executor.run(request)
    except Exception as e:
        logger.error("[CHAT] Pipeline failed unexpectedly: %s", e, exc_info=True)
        envelope = ResponseEnvelope.from_error(
            PipelineError("An unexpected error occurred while processing your request."),
            workflow=request.workflow,
            model=request.model,
        )

    return JSONResponse(
        status_code=envelope.status_code,
        content=envelope.model_dump(mode="json"),
    )


@router.get("/workflows", response_model=list[WorkflowInfo])
async def workflows():
    return [
        WorkflowInfo(
            id=plan.workflow.value,
            stages=[stage.value for stage in plan.stages],
            search_provider=plan.search_provider,
        )
        for plan in list_workflows()
    ]


@router.get("/models", response_model=list[ModelInfo])
async def models():
    return [
        ModelInfo(id=model_id, provider=provider, answer_capable=is_answer_model(model_id))
        for model_id, provider in MODEL_CATALOG.items()
    ]
