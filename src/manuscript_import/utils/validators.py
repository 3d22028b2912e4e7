"""Input validation for documents submitted to structure detection.

Functions:
- validate_content(content, min_length) -> str: Accept text or raise InputError
"""

from typing import Any

DEFAULT_MIN_CONTENT_LENGTH = 500


class StructureDetectionError(Exception):
    """Base exception for structure detection errors."""

    pass


class InputError(StructureDetectionError):
    """Raised when content is missing, not text, or too short to segment."""

    pass


def validate_content(content: Any, min_length: int = DEFAULT_MIN_CONTENT_LENGTH) -> str:
    """Check that content can be segmented.

    Args:
        content: Candidate document text
        min_length: Minimum number of characters required

    Returns:
        The content, unchanged

    Raises:
        InputError: If content is missing, not a string, or shorter than min_length
    """
    if not content or not isinstance(content, str):
        raise InputError("Content is required")

    if len(content) < min_length:
        raise InputError(
            f"Content too short for chapter detection "
            f"({len(content)} characters, minimum {min_length})"
        )

    return content
