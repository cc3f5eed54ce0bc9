"""
Pydantic schemas for every pipeline boundary.
Each module covers one pipeline stage or cross-cutting concern.
"""

from orsbot.schemas.messages import (
    AttachmentDescriptor,
    ContentPart,
    ConversationMessage,
    FileDataPart,
    ImagePart,
    ImageUrl,
    InlineDataPart,
    TextPart,
    UploadedFileHandle,
)
from orsbot.schemas.search import SearchOutcome, SearchResult
from orsbot.schemas.providers import AnswerResult, RewriteResult
from orsbot.schemas.pipeline import (
    PipelineContext,
    PipelineStageResult,
    StageType,
    WorkflowId,
)
from orsbot.schemas.response import (
    ChatRequest,
    ModelInfo,
    ResponseEnvelope,
    WorkflowInfo,
)

__all__ = [
    # Messages
    "AttachmentDescriptor",
    "ContentPart",
    "ConversationMessage",
    "FileDataPart",
    "ImagePart",
    "ImageUrl",
    "InlineDataPart",
    "TextPart",
    "UploadedFileHandle",
    # Search
    "SearchOutcome",
    "SearchResult",
    # Providers
    "AnswerResult",
    "RewriteResult",
    # Pipeline
    "PipelineContext",
    "PipelineStageResult",
    "StageType",
    "WorkflowId",
    # Response
    "ChatRequest",
    "ModelInfo",
    "ResponseEnvelope",
    "WorkflowInfo",
]
