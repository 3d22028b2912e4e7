"""Tests for structure reconciliation (F2)."""

import pytest

from manuscript_import.core.ai_augmenter import (
    AIAct,
    AIBreakpoint,
    AugmenterResult,
    parse_structure_payload,
)
from manuscript_import.core.models import ChapterCandidate
from manuscript_import.core.reconciler import (
    chapters_from_breakpoints,
    detect_acts,
    infer_title,
    needs_augmentation,
    reconcile,
)
from manuscript_import.core.segmenter import segment_document
from manuscript_import.utils.text_utils import count_words


def _chapters(*types):
    """Chapters of the given types laid end to end (10 chars each)."""
    return [
        ChapterCandidate(
            index=i,
            title=f"Section {i}",
            start_offset=i * 10,
            end_offset=(i + 1) * 10,
            word_count=2,
            preview="",
            type=chapter_type,
        )
        for i, chapter_type in enumerate(types)
    ]


class TestNeedsAugmentation:
    """Sparseness heuristic."""

    @pytest.mark.parametrize(
        "chapters,words,expected",
        [
            (1, 5001, True),
            (1, 5000, False),
            (2, 10001, True),
            (2, 9000, False),
            (2, 6000, False),
            (3, 50000, False),
        ],
    )
    def test_thresholds(self, detector_config, chapters, words, expected):
        assert needs_augmentation(chapters, words, detector_config) is expected


class TestDetectActs:
    """Act grouping from part-typed chapters."""

    def test_two_parts(self):
        acts = detect_acts(_chapters("part", "chapter", "chapter", "part", "chapter"))

        assert [(a.number, a.start_chapter_index, a.end_chapter_index) for a in acts] == [
            (1, 0, 2),
            (2, 3, 4),
        ]
        assert acts[0].title == "Act 1"

    def test_chapters_before_first_part_form_opening_act(self):
        acts = detect_acts(_chapters("prologue", "part", "chapter", "part", "chapter"))

        assert [(a.start_chapter_index, a.end_chapter_index) for a in acts] == [
            (0, 0),
            (1, 2),
            (3, 4),
        ]

    def test_single_act_is_not_acted(self):
        assert detect_acts(_chapters("part", "chapter", "chapter")) == ()

    def test_no_parts(self):
        assert detect_acts(_chapters("chapter", "chapter")) == ()
        assert detect_acts([]) == ()


class TestInferTitle:
    """Title inference heuristics."""

    def test_title_page_chapter(self, detector_config, make_prose):
        """A short first chapter is read as a title page."""
        document = "THE SILENT HARBOR\nA Novel\n\nChapter 1\n" + make_prose(10)
        chapters = segment_document(document)

        assert chapters[0].word_count < 100
        assert infer_title(document, chapters, detector_config) == "THE SILENT HARBOR"

    def test_short_line_near_top(self, detector_config, make_prose):
        document = "The Silent Harbor\n\nChapter 1\n" + make_prose(10)
        chapters = segment_document(document)

        assert chapters[0].word_count >= 100
        assert infer_title(document, chapters, detector_config) == "The Silent Harbor"

    def test_markers_are_not_titles(self, detector_config, make_prose):
        document = "Chapter 1\n" + make_prose(10) + "\nChapter 2\n" + make_prose(10)
        chapters = segment_document(document)

        assert infer_title(document, chapters, detector_config) == "Untitled"


class TestChaptersFromBreakpoints:
    """Rebuilding chapters from AI breakpoints."""

    def test_bounds_and_counts(self, make_prose):
        document = make_prose(6)
        breakpoints = [
            AIBreakpoint(position=0, title="A"),
            AIBreakpoint(position=200, title="B"),
            AIBreakpoint(position=600, title="C", type="epilogue"),
        ]
        chapters = chapters_from_breakpoints(document, breakpoints, preview_chars=200)

        assert [(c.start_offset, c.end_offset) for c in chapters] == [
            (0, 200),
            (200, 600),
            (600, len(document)),
        ]
        assert chapters[1].word_count == count_words(document[200:600])
        assert chapters[2].type == "epilogue"


class TestReconcile:
    """Selection between rule-based and AI results."""

    def test_without_ai_keeps_rule_based(self, detector_config, structured_document):
        rule_based = segment_document(structured_document)
        total = count_words(structured_document)

        structure = reconcile(structured_document, rule_based, None, total, detector_config)

        assert list(structure.chapters) == rule_based
        assert len(structure.acts) == 3
        assert structure.total_word_count == total

    def test_more_ai_breakpoints_win(self, detector_config, sparse_document, breakpoint_payload):
        rule_based = segment_document(sparse_document)
        ai_result = parse_structure_payload(breakpoint_payload, len(sparse_document))

        structure = reconcile(
            sparse_document, rule_based, ai_result, count_words(sparse_document), detector_config
        )

        assert len(structure.chapters) == 4
        assert structure.title == "The Lighthouse Keeper"
        assert [ch.title for ch in structure.chapters] == [
            "Arrival",
            "The Storm",
            "Wreckage",
            "Afterward",
        ]
        for chapter, following in zip(structure.chapters, structure.chapters[1:]):
            assert chapter.end_offset == following.start_offset
        assert structure.chapters[-1].end_offset == len(sparse_document)
        assert [a.title for a in structure.acts] == ["Calm", "Storm"]

    def test_equal_breakpoints_keep_rule_based(self, detector_config, two_chapter_document):
        rule_based = segment_document(two_chapter_document)
        ai_result = AugmenterResult(
            breakpoints=(
                AIBreakpoint(position=0, title="X"),
                AIBreakpoint(position=50, title="Y"),
            ),
            title="AI Title",
        )

        structure = reconcile(
            two_chapter_document,
            rule_based,
            ai_result,
            count_words(two_chapter_document),
            detector_config,
        )

        assert [ch.title for ch in structure.chapters] == ["Chapter 1", "Chapter 2"]
        assert structure.title != "AI Title"

    def test_invalid_ai_acts_fall_back_to_inference(self, detector_config, make_prose):
        document = make_prose(6)
        ai_result = AugmenterResult(
            breakpoints=(
                AIBreakpoint(position=0, title="Part A", type="part"),
                AIBreakpoint(position=300, title="One"),
                AIBreakpoint(position=600, title="Part B", type="part"),
            ),
            title="Untitled",
            acts=(AIAct(number=1, title="Too far", start_chapter_index=2, end_chapter_index=9),),
        )

        structure = reconcile(
            document, segment_document(document), ai_result, count_words(document), detector_config
        )

        assert [(a.start_chapter_index, a.end_chapter_index) for a in structure.acts] == [
            (0, 1),
            (2, 2),
        ]
        # "Untitled" from the service is not taken as a real title
        assert structure.title == "Untitled"
