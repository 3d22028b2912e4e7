"""Reconciliation of rule-based and AI-suggested structure.

Policy: AI breakpoints replace the rule-based chapters outright when there
are strictly more of them. Otherwise the rule-based chapters are kept and
title/acts are inferred heuristically.
"""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from manuscript_import.config.app_config import DetectorConfig
from manuscript_import.core.ai_augmenter import AIAct, AIBreakpoint, AugmenterResult
from manuscript_import.core.models import (
    DEFAULT_TITLE,
    ActGroup,
    ChapterCandidate,
    DocumentStructure,
)
from manuscript_import.core.pattern_classifier import classify_line
from manuscript_import.core.segmenter import build_chapter
from manuscript_import.utils.text_utils import clean_line

logger = structlog.get_logger(__name__)

TITLE_LINE_MIN = 5
TITLE_LINE_MAX = 80
TITLE_PAGE_LINE_MAX = 100


def needs_augmentation(chapter_count: int, word_count: int, config: DetectorConfig) -> bool:
    """Sparseness heuristic: too few chapters for the document size."""
    return (
        chapter_count <= config.sparse_max_chapters
        and word_count > config.sparse_word_threshold
    ) or (chapter_count == 1 and word_count > config.single_chapter_word_threshold)


def detect_acts(chapters: Sequence[ChapterCandidate]) -> tuple[ActGroup, ...]:
    """Group chapters into acts delimited by part-typed chapters.

    Chapters before the first part marker form an opening act. A single
    act means the document is not divided, so an empty tuple is returned.
    """
    starts = [ch.index for ch in chapters if ch.type == "part"]
    if not chapters or not starts:
        return ()

    if starts[0] != chapters[0].index:
        starts.insert(0, chapters[0].index)

    acts = []
    for number, start in enumerate(starts, start=1):
        end = starts[number] - 1 if number < len(starts) else chapters[-1].index
        acts.append(
            ActGroup(
                number=number,
                title=f"Act {number}",
                start_chapter_index=start,
                end_chapter_index=end,
            )
        )

    return tuple(acts) if len(acts) > 1 else ()


def infer_title(
    document: str,
    chapters: Sequence[ChapterCandidate],
    config: DetectorConfig,
) -> str:
    """Guess the document title.

    1. A very short first chapter is treated as a title page: its first
       non-empty line wins.
    2. Otherwise the first short, non-marker line near the top.
    3. Otherwise "Untitled".
    """
    if chapters and chapters[0].word_count < config.title_page_max_words:
        first = chapters[0]
        lines = [
            clean_line(line)
            for line in document[first.start_offset : first.end_offset].split("\n")
            if clean_line(line)
        ]
        if lines and len(lines[0]) < TITLE_PAGE_LINE_MAX:
            return lines[0]

    for line in document.split("\n")[: config.title_scan_lines]:
        stripped = clean_line(line)
        if (
            TITLE_LINE_MIN < len(stripped) < TITLE_LINE_MAX
            and not classify_line(stripped).is_marker
        ):
            return stripped

    return DEFAULT_TITLE


def chapters_from_breakpoints(
    document: str,
    breakpoints: Sequence[AIBreakpoint],
    preview_chars: int,
) -> list[ChapterCandidate]:
    """Rebuild chapters from sorted breakpoints; each ends at the next one."""
    chapters = []
    for index, bp in enumerate(breakpoints):
        end = breakpoints[index + 1].position if index + 1 < len(breakpoints) else len(document)
        chapters.append(
            build_chapter(
                document,
                index,
                bp.title,
                bp.position,
                end,
                chapter_type=bp.type,
                preview_chars=preview_chars,
            )
        )
    return chapters


def _acts_from_ai(acts: Sequence[AIAct], chapter_count: int) -> tuple[ActGroup, ...]:
    return tuple(
        ActGroup(
            number=act.number,
            title=act.title,
            start_chapter_index=act.start_chapter_index,
            end_chapter_index=act.end_chapter_index,
        )
        for act in acts
        if 0 <= act.start_chapter_index <= act.end_chapter_index < chapter_count
    )


def reconcile(
    document: str,
    rule_based: Sequence[ChapterCandidate],
    ai_result: AugmenterResult | None,
    total_word_count: int,
    config: DetectorConfig,
) -> DocumentStructure:
    """Pick the chapter list and infer title and acts.

    Args:
        document: Full document text
        rule_based: Chapters from the rule-based pass
        ai_result: Validated AI suggestion, or None if not invoked / failed
        total_word_count: Whitespace-token count of the whole document
        config: Detector settings

    Returns:
        Complete DocumentStructure
    """
    if ai_result is not None and len(ai_result.breakpoints) > len(rule_based):
        chapters = chapters_from_breakpoints(
            document, ai_result.breakpoints, config.preview_chars
        )
        acts = _acts_from_ai(ai_result.acts, len(chapters)) or detect_acts(chapters)
        if ai_result.title and ai_result.title != DEFAULT_TITLE:
            title = ai_result.title
        else:
            title = infer_title(document, chapters, config)

        logger.info(
            "reconciler.ai_breakpoints_adopted",
            ai_chapters=len(chapters),
            rule_based_chapters=len(rule_based),
        )
    else:
        chapters = list(rule_based)
        acts = detect_acts(chapters)
        title = infer_title(document, chapters, config)

    return DocumentStructure(
        title=title,
        chapters=tuple(chapters),
        acts=acts,
        total_word_count=total_word_count,
    )
