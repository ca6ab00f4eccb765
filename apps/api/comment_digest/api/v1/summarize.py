from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from loguru import logger

from comment_digest.api.deps import get_llm, get_request_id, get_settings
from comment_digest.core.config import Settings
from comment_digest.schemas.summarize import SummarizeRequest, SummarizeResponse, SummaryMetadata
from comment_digest.services.llm.gemini_client import GeminiClient, LLMError, LLMInvalidResponseError
from comment_digest.services.summarize.pipeline import CommentInputError, summarize_comments

router = APIRouter(tags=["summarize"])

@router.post("/summarize", response_model=SummarizeResponse)
async def summarize(
    payload: SummarizeRequest,
    settings: Settings = Depends(get_settings),
    llm: GeminiClient = Depends(get_llm),
    request_id: str = Depends(get_request_id),
):
    try:
        result = await summarize_comments(
            payload.comments,
            settings=settings,
            llm=llm,
            request_id=request_id,
        )
    except CommentInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except LLMInvalidResponseError:
        raise HTTPException(status_code=502, detail="Invalid response from AI service")
    except LLMError as e:
        logger.error(f"Summary generation failed request_id={request_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to generate summary")

    return SummarizeResponse(
        summary=result.summary,
        metadata=SummaryMetadata(
            comments_processed=result.processed,
            original_count=result.original,
            analysis_type=result.analysis_type,
            timestamp=result.timestamp,
            request_id=result.request_id,
        ),
    )
