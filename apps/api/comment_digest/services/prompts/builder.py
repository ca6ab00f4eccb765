from __future__ import annotations

from enum import Enum
from typing import List, Optional, Sequence

DETAILED_THRESHOLD = 20


class AnalysisType(str, Enum):
    SIMPLE = "simple"
    DETAILED = "detailed"


def select_analysis_type(count: int, threshold: int = DETAILED_THRESHOLD) -> AnalysisType:
    if count >= threshold:
        return AnalysisType.DETAILED
    return AnalysisType.SIMPLE


def _numbered(comments: Sequence[str]) -> str:
    return "\n".join(f"[{i}] {c}" for i, c in enumerate(comments, start=1))


def _bulleted(comments: Sequence[str]) -> str:
    return "\n".join(f"• {c}" for c in comments)


def build_detailed_prompt(comments: Sequence[str]) -> str:
    return f"""You are an expert content analyst specializing in audience feedback interpretation.
Analyze these comments to provide a comprehensive yet concise assessment.

COMMENTS TO ANALYZE (cite them by their [n] reference when useful):
{_numbered(comments)}

ANALYSIS FRAMEWORK:
Your response must be exactly 3-4 paragraphs, each serving a specific purpose:

**PARAGRAPH 1 - AUDIENCE RECEPTION:**
Determine overall sentiment (positive/mixed/negative) and engagement level.
Identify the primary emotional reactions and the general consensus.

**PARAGRAPH 2 - CONTENT QUALITY INSIGHTS:**
Analyze what commenters specifically praised or criticized: presentation,
accuracy of information and production quality.

**PARAGRAPH 3 - KEY THEMES & OUTLIERS:**
Identify the recurring topics and concerns. Mention notable outlier opinions
that go against the consensus.

**PARAGRAPH 4 - ACTIONABLE SUMMARY:**
Give a brief, balanced conclusion with the most important takeaways for the creator.

WRITING GUIDELINES:
- Write in a professional, analytical tone
- Use specific, concrete language rather than vague generalizations
- Include quantitative insights when patterns are clear (e.g. "majority", "several", "few")
- Avoid repetitive phrasing between paragraphs
- Focus on actionable insights rather than just listing opinions

Begin your analysis now:"""


def build_simple_prompt(comments: Sequence[str]) -> str:
    return f"""Analyze these comments and provide a concise, insightful summary in 2-3 paragraphs:

{_bulleted(comments)}

Focus on:
1. Overall audience sentiment and engagement
2. Specific content feedback and key themes
3. Most important takeaways for understanding the reception

Write professionally and analytically, avoiding generic statements.
Be specific about what commenters liked, disliked, or found noteworthy."""


def build_prompt(comments: List[str], analysis_type: Optional[AnalysisType] = None) -> str:
    if not comments:
        raise ValueError("Cannot build a prompt from an empty comment set")

    kind = analysis_type or select_analysis_type(len(comments))
    if kind == AnalysisType.DETAILED:
        return build_detailed_prompt(comments)
    return build_simple_prompt(comments)
