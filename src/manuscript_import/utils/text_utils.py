"""Text processing utilities.

Word counting and preview helpers shared by the segmenter and the
reconciler, so rule-based and AI-built chapters are measured the same way.
"""

import re

WHITESPACE_RUN = re.compile(r"\s+")

PREVIEW_CHARS = 200
ELLIPSIS = "..."
BOM = "\ufeff"


def count_words(text: str) -> int:
    """Count whitespace-delimited tokens."""
    return len(text.split())


def clean_line(line: str) -> str:
    """Trim whitespace and a leading byte-order mark."""
    return line.strip().lstrip(BOM).lstrip()


def collapse_whitespace(text: str) -> str:
    """Replace every whitespace run with a single space and trim."""
    return WHITESPACE_RUN.sub(" ", text).strip()


def build_preview(span: str, max_chars: int = PREVIEW_CHARS) -> str:
    """Build a short preview of a chapter body.

    The first line of the span (the marker/title line) is skipped, the
    remaining body is trimmed, cut to ``max_chars`` and whitespace-collapsed.
    An ellipsis is appended when the body was longer than ``max_chars``.

    Args:
        span: Chapter text, including its title line
        max_chars: Maximum number of body characters to keep

    Returns:
        Preview string (possibly empty)
    """
    body = "\n".join(span.split("\n")[1:]).strip()
    preview = collapse_whitespace(body[:max_chars])
    if len(body) > max_chars:
        preview += ELLIPSIS
    return preview
