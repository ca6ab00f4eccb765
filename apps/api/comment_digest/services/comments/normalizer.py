from __future__ import annotations

import re
import string
from collections import Counter
from typing import Any, Iterable, List, Optional

from loguru import logger

MIN_COMMENT_CHARS = 10
MAX_COMMENT_CHARS = 800
MAX_KEPT_COMMENTS = 120

# Low-information filler, matched against the whole comment.
FILLER_COMMENTS = frozenset({"first", "second", "third", "early", "late"})

_WHITESPACE_RE = re.compile(r"\s+")
_WORD_RE = re.compile(r"\w")
_URL_RE = re.compile(r"https?://|www\.", re.IGNORECASE)


def clean_comment(raw: Any) -> str:
    """Trim and collapse whitespace runs to a single space. Non-strings clean to ''."""
    if not isinstance(raw, str):
        return ""
    return _WHITESPACE_RE.sub(" ", raw).strip()


def is_filler(text: str) -> bool:
    return text.strip(string.punctuation + " ").lower() in FILLER_COMMENTS


def rejection_reason(
    text: str,
    min_chars: int = MIN_COMMENT_CHARS,
    max_chars: int = MAX_COMMENT_CHARS,
) -> Optional[str]:
    """Why a cleaned comment would be dropped, or None if it is kept."""
    if not text:
        return "empty"
    if len(text) < min_chars:
        return "too_short"
    if len(text) > max_chars:
        return "too_long"
    if not _WORD_RE.search(text):
        return "no_words"
    if _URL_RE.search(text):
        return "url"
    if is_filler(text):
        return "filler"
    return None


def normalize_comments(
    comments: Iterable[Any],
    *,
    min_chars: int = MIN_COMMENT_CHARS,
    max_chars: int = MAX_COMMENT_CHARS,
    limit: int = MAX_KEPT_COMMENTS,
) -> List[str]:
    """
    Filter, dedupe and cap raw comments:
    - cleans whitespace
    - drops empty, short, long, wordless, link and filler comments
    - keeps the first occurrence of exact repeats
    - stops after `limit` comments, input order preserved
    """
    kept: List[str] = []
    seen = set()
    dropped: Counter = Counter()

    for raw in comments:
        if len(kept) >= limit:
            dropped["over_limit"] += 1
            continue

        text = clean_comment(raw)
        reason = rejection_reason(text, min_chars=min_chars, max_chars=max_chars)
        if reason:
            dropped[reason] += 1
            continue
        if text in seen:
            dropped["duplicate"] += 1
            continue

        seen.add(text)
        kept.append(text)

    if dropped:
        logger.debug(f"Normalization kept {len(kept)} comments, dropped {dict(dropped)}")
    return kept
