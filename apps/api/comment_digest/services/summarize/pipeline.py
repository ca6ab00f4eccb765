from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional

from loguru import logger

from comment_digest.core.config import Settings
from comment_digest.services.comments import normalizer
from comment_digest.services.formatting.summary import format_summary
from comment_digest.services.llm.gemini_client import GeminiClient
from comment_digest.services.prompts.builder import AnalysisType, build_prompt, select_analysis_type
from comment_digest.utils.ids import utc_timestamp

INVALID_INPUT_MESSAGE = "Invalid input: comments array is required and must not be empty"


class CommentInputError(ValueError):
    """Caller-supplied comments cannot be analyzed."""


@dataclass(frozen=True)
class SummaryResult:
    summary: str
    processed: int
    original: int
    analysis_type: AnalysisType
    timestamp: str
    request_id: str


def validate_comments(comments: Optional[List[Any]], max_count: int) -> List[Any]:
    if not comments or not isinstance(comments, list):
        raise CommentInputError(INVALID_INPUT_MESSAGE)
    if len(comments) > max_count:
        raise CommentInputError(f"Too many comments: maximum {max_count} comments allowed per request")
    return comments


def prepare_comments(comments: Optional[List[Any]], settings: Settings) -> List[str]:
    """Validate the raw batch and normalize it; raises CommentInputError on unusable input."""
    raw = validate_comments(comments, settings.MAX_REQUEST_COMMENTS)

    processed = normalizer.normalize_comments(
        raw,
        min_chars=settings.COMMENT_MIN_CHARS,
        max_chars=settings.COMMENT_MAX_CHARS,
        limit=settings.COMMENT_LIMIT,
    )
    if len(processed) < settings.MIN_PROCESSED_COMMENTS:
        raise CommentInputError(
            f"Insufficient comments: at least {settings.MIN_PROCESSED_COMMENTS} "
            "meaningful comments required for analysis"
        )
    return processed


async def summarize_comments(
    comments: Optional[List[Any]],
    *,
    settings: Settings,
    llm: GeminiClient,
    request_id: str,
) -> SummaryResult:
    processed = prepare_comments(comments, settings)

    analysis_type = select_analysis_type(len(processed), settings.DETAILED_ANALYSIS_THRESHOLD)
    prompt = build_prompt(processed, analysis_type)
    logger.info(f"Processing {len(processed)} comments ({len(comments)} original) request_id={request_id}")
    logger.info(f"Prompt length: {len(prompt)} characters, analysis={analysis_type.value}")

    raw_summary = await llm.generate(prompt, request_id=request_id)
    summary = format_summary(raw_summary)

    logger.info(f"Analysis complete. request_id={request_id}, summary length: {len(summary)} chars")
    return SummaryResult(
        summary=summary,
        processed=len(processed),
        original=len(comments),
        analysis_type=analysis_type,
        timestamp=utc_timestamp(),
        request_id=request_id,
    )
