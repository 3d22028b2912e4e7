"""Rule-based chapter segmentation.

Single forward pass over the document lines. Each marker line closes the
open chapter at the marker's start offset and opens a new one there; the
last chapter is closed at the end of the document. Offsets stay contiguous:
``chapters[i].end_offset == chapters[i + 1].start_offset``.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from manuscript_import.core.models import FULL_TEXT_TITLE, ChapterCandidate, ChapterType
from manuscript_import.core.pattern_classifier import classify_line
from manuscript_import.utils.text_utils import PREVIEW_CHARS, build_preview, count_words

logger = structlog.get_logger(__name__)


@dataclass
class _OpenChapter:
    title: str
    start_offset: int
    type: ChapterType
    part_number: int | None = None
    act_number: int | None = None


def build_chapter(
    document: str,
    index: int,
    title: str,
    start_offset: int,
    end_offset: int,
    chapter_type: ChapterType = "chapter",
    part_number: int | None = None,
    act_number: int | None = None,
    preview_chars: int = PREVIEW_CHARS,
) -> ChapterCandidate:
    """Create a chapter with word count and preview computed from its span."""
    span = document[start_offset:end_offset]
    return ChapterCandidate(
        index=index,
        title=title,
        start_offset=start_offset,
        end_offset=end_offset,
        word_count=count_words(span),
        preview=build_preview(span, preview_chars),
        type=chapter_type,
        part_number=part_number,
        act_number=act_number,
    )


def segment_document(document: str, preview_chars: int = PREVIEW_CHARS) -> list[ChapterCandidate]:
    """Split a document into chapters using line-level marker detection.

    Args:
        document: Full plain-text content
        preview_chars: Preview length for each chapter

    Returns:
        Ordered, contiguous chapters. Never empty: without markers the whole
        document becomes one chapter titled "Full Text".
    """
    spans: list[tuple[_OpenChapter, int]] = []
    current: _OpenChapter | None = None
    offset = 0

    for line in document.split("\n"):
        line_start = offset
        offset += len(line) + 1

        classification = classify_line(line)
        if not classification.is_marker:
            continue

        if current is not None:
            spans.append((current, line_start))

        current = _OpenChapter(
            title=classification.title or f"Chapter {len(spans) + 1}",
            start_offset=line_start,
            type=classification.type,
            part_number=classification.part_number,
            act_number=classification.act_number,
        )

    if current is not None:
        spans.append((current, len(document)))

    if not spans:
        logger.debug("segmenter.no_markers", length=len(document))
        return [
            build_chapter(
                document, 0, FULL_TEXT_TITLE, 0, len(document), preview_chars=preview_chars
            )
        ]

    chapters = [
        build_chapter(
            document,
            index,
            opened.title,
            opened.start_offset,
            end_offset,
            chapter_type=opened.type,
            part_number=opened.part_number,
            act_number=opened.act_number,
            preview_chars=preview_chars,
        )
        for index, (opened, end_offset) in enumerate(spans)
    ]

    logger.debug("segmenter.done", chapters=len(chapters), length=len(document))
    return chapters
