"""
Workflow id → ordered stage plan.

The table is static; adding a workflow means adding one entry.
"""

from __future__ import annotations

from dataclasses import dataclass

from orsbot.core.errors import ValidationError
from orsbot.schemas.pipeline import StageType, WorkflowId


@dataclass(frozen=True)
class WorkflowPlan:
    workflow: WorkflowId
    stages: tuple[StageType, ...]
    search_provider: str | None = None

    @property
    def has_search(self) -> bool:
        return StageType.SEARCH in self.stages

    @property
    def has_rewrite(self) -> bool:
        return StageType.REWRITE in self.stages


WORKFLOW_PLANS: dict[WorkflowId, WorkflowPlan] = {
    WorkflowId.SINGLE: WorkflowPlan(
        WorkflowId.SINGLE,
        (StageType.ANSWER,),
    ),
    WorkflowId.CHATGPT_TO_GEMINI: WorkflowPlan(
        WorkflowId.CHATGPT_TO_GEMINI,
        (StageType.REWRITE, StageType.ANSWER),
    ),
    WorkflowId.TAVILY_TO_GEMINI: WorkflowPlan(
        WorkflowId.TAVILY_TO_GEMINI,
        (StageType.SEARCH, StageType.ANSWER),
        search_provider="tavily",
    ),
    WorkflowId.PERPLEXITY_TO_GEMINI: WorkflowPlan(
        WorkflowId.PERPLEXITY_TO_GEMINI,
        (StageType.SEARCH, StageType.ANSWER),
        search_provider="perplexity",
    ),
    WorkflowId.PERPLEXITY_CHATGPT_GEMINI: WorkflowPlan(
        WorkflowId.PERPLEXITY_CHATGPT_GEMINI,
        (StageType.SEARCH, StageType.REWRITE, StageType.ANSWER),
        search_provider="perplexity",
    ),
}


def resolve_workflow(workflow: str | None) -> WorkflowPlan:
    """Plan for ``workflow`` (blank means ``single``)."""
    raw = (workflow or "").strip() or WorkflowId.SINGLE.value
    try:
        workflow_id = WorkflowId(raw)
    except ValueError:
        raise ValidationError(
            f"Unsupported workflow: {raw}",
            kind="unsupported_workflow",
            details={"workflow": raw, "supported": [w.value for w in WorkflowId]},
        ) from None
    return WORKFLOW_PLANS[workflow_id]


def list_workflows() -> list[WorkflowPlan]:
    return list(WORKFLOW_PLANS.values())
