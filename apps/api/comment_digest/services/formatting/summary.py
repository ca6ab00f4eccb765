import re

_EXTRA_NEWLINES_RE = re.compile(r"\n{3,}")


def format_summary(raw: str, separator: str = "\n\n") -> str:
    """
    Tidy model output for markdown rendering:
    - collapses 3+ newlines into one blank line
    - trims every line and drops the empty ones
    - rejoins lines with `separator`
    """
    text = _EXTRA_NEWLINES_RE.sub("\n\n", raw or "").strip()
    lines = [line.strip() for line in text.split("\n")]
    return separator.join(line for line in lines if line)
