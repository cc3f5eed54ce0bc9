"""
Workflow id → stage plan table.
"""

import pytest

from orsbot.core.errors import ValidationError
from orsbot.pipeline.selector import list_workflows, resolve_workflow
from orsbot.schemas.pipeline import StageType

S, R, A = StageType.SEARCH, StageType.REWRITE, StageType.ANSWER


@pytest.mark.parametrize("workflow, stages, provider", [
    ("single", (A,), None),
    ("chatgpt-to-gemini", (R, A), None),
    ("tavily-to-gemini", (S, A), "tavily"),
    ("perplexity-to-gemini", (S, A), "perplexity"),
    ("perplexity-chatgpt-gemini", (S, R, A), "perplexity"),
])
def test_stage_sequences(workflow, stages, provider):
    plan = resolve_workflow(workflow)
    assert plan.stages == stages
    assert plan.search_provider == provider
    assert plan.has_search == (S in stages)


def test_blank_workflow_defaults_to_single():
    assert resolve_workflow(None).stages == (A,)
    assert resolve_workflow("  ").stages == (A,)


def test_unknown_workflow_is_rejected():
    with pytest.raises(ValidationError) as info:
        resolve_workflow("bing-to-gemini")
    assert info.value.kind == "unsupported_workflow"
    assert info.value.status_code == 400


def test_list_workflows_covers_every_id():
    assert [p.workflow.value for p in list_workflows()] == [
        "single",
        "chatgpt-to-gemini",
        "tavily-to-gemini",
        "perplexity-to-gemini",
        "perplexity-chatgpt-gemini",
    ]
