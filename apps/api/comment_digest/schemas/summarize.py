from pydantic import BaseModel, ConfigDict, Field
from typing import Any, List, Optional

from comment_digest.services.prompts.builder import AnalysisType

class SummarizeRequest(BaseModel):
    # items stay untyped; normalization discards anything that is not a string
    comments: Optional[List[Any]] = None
    metadata: Optional[Any] = None

class SummaryMetadata(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    comments_processed: int = Field(..., alias="commentsProcessed")
    original_count: int = Field(..., alias="originalCount")
    analysis_type: AnalysisType = Field(..., alias="analysisType")
    timestamp: str
    request_id: str = Field(..., alias="requestId")

class SummarizeResponse(BaseModel):
    summary: str
    metadata: SummaryMetadata
