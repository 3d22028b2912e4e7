"""Line classification for structural markers.

A line is tested against an ordered table of marker rules, from the most
lexically specific (keyword-anchored) to the least (generic ALL-CAPS header).
The first rule that matches wins.

Rules:
1. "Chapter 3", "Ch. IV: Title", "CHAPTER ONE"   -> chapter
2. "12. Title", "3 - Title"                       -> chapter
3. "Part Two", "Book 1: Title", "Volume III"      -> part
4. "Prologue", "Afterword: Title", "Interlude"    -> prologue / epilogue / interlude
5. "Act I", "ACT ONE: Title"                      -> part (act divider)
6. "IV. Title", "XII -"                           -> chapter
7. "THE LONG NIGHT BEGINS"                        -> chapter (weak)
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable

from manuscript_import.core.models import ChapterType
from manuscript_import.core.number_decoder import decode_number, decode_roman
from manuscript_import.utils.text_utils import clean_line

MAX_MARKER_LENGTH = 100

# Number token after the keyword: digits ("Chapter1", "Ch.4") or a word
# ("One", "IV", "Ch.IV"). A word token needs a boundary after the keyword,
# which keeps "Change", "Chapters" and "Actually" out.
_NUMBER_TOKEN = r"(?:\.?\s*(?P<num>\d+)|\b\.?\s*(?P<word>[a-z]+))\b"
_OPTIONAL_SEPARATOR = r"\s*[:\-–—.]?\s*"
_REQUIRED_SEPARATOR = r"\s*[.:\-–—]\s*"
_TITLE = r"(?P<title>.*)$"

CHAPTER_PATTERN = re.compile(
    r"^(?:chapter|ch)" + _NUMBER_TOKEN + _OPTIONAL_SEPARATOR + _TITLE, re.IGNORECASE
)
NUMBERED_PATTERN = re.compile(r"^(?P<num>\d{1,3})" + _REQUIRED_SEPARATOR + _TITLE)
PART_PATTERN = re.compile(
    r"^(?P<keyword>part|book|volume)" + _NUMBER_TOKEN + _OPTIONAL_SEPARATOR + _TITLE,
    re.IGNORECASE,
)
FRONT_BACK_PATTERN = re.compile(
    r"^(?P<keyword>prologue|epilogue|interlude|preface|introduction|afterword)\b"
    + _OPTIONAL_SEPARATOR
    + _TITLE,
    re.IGNORECASE,
)
ACT_PATTERN = re.compile(
    r"^act" + _NUMBER_TOKEN + _OPTIONAL_SEPARATOR + _TITLE, re.IGNORECASE
)
ROMAN_PATTERN = re.compile(r"^(?P<roman>[ivxlcdm]+)" + _REQUIRED_SEPARATOR + _TITLE, re.IGNORECASE)
ALL_CAPS_PATTERN = re.compile(r"^[A-Z][A-Z\s]{10,50}$")

FRONT_BACK_TYPES: dict[str, ChapterType] = {
    "prologue": "prologue",
    "preface": "prologue",
    "introduction": "prologue",
    "epilogue": "epilogue",
    "afterword": "epilogue",
    "interlude": "interlude",
}


@dataclass(frozen=True)
class LineClassification:
    """Outcome of classifying one line."""

    is_marker: bool
    type: ChapterType = "chapter"
    title: str = ""
    number: int | None = None
    part_number: int | None = None
    act_number: int | None = None


NOT_A_MARKER = LineClassification(is_marker=False)


@dataclass(frozen=True)
class MarkerRule:
    """One entry of the ordered marker table."""

    name: str
    pattern: re.Pattern[str]
    build: Callable[[re.Match[str], str], LineClassification]


def _token_number(match: re.Match[str]) -> int:
    return decode_number(match.group("num") or match.group("word"))


def _title(match: re.Match[str], default: str) -> str:
    return match.group("title").strip() or default


def _build_chapter(match: re.Match[str], line: str) -> LineClassification:
    number = _token_number(match)
    return LineClassification(
        is_marker=True,
        type="chapter",
        title=_title(match, f"Chapter {number}"),
        number=number,
    )


def _build_numbered(match: re.Match[str], line: str) -> LineClassification:
    number = int(match.group("num"))
    return LineClassification(
        is_marker=True,
        type="chapter",
        title=_title(match, f"Chapter {number}"),
        number=number,
    )


def _build_part(match: re.Match[str], line: str) -> LineClassification:
    number = _token_number(match)
    keyword = match.group("keyword").capitalize()
    return LineClassification(
        is_marker=True,
        type="part",
        title=_title(match, f"{keyword} {number}"),
        number=number,
        part_number=number,
    )


def _build_front_back(match: re.Match[str], line: str) -> LineClassification:
    keyword = match.group("keyword").lower()
    return LineClassification(
        is_marker=True,
        type=FRONT_BACK_TYPES[keyword],
        title=_title(match, keyword.capitalize()),
    )


def _build_act(match: re.Match[str], line: str) -> LineClassification:
    number = _token_number(match)
    return LineClassification(
        is_marker=True,
        type="part",
        title=_title(match, f"Act {number}"),
        number=number,
        act_number=number,
    )


def _build_roman(match: re.Match[str], line: str) -> LineClassification:
    number = decode_roman(match.group("roman"))
    return LineClassification(
        is_marker=True,
        type="chapter",
        title=_title(match, f"Chapter {number}"),
        number=number,
    )


def _build_all_caps(match: re.Match[str], line: str) -> LineClassification:
    return LineClassification(is_marker=True, type="chapter", title=line)


MARKER_RULES: tuple[MarkerRule, ...] = (
    MarkerRule("chapter_word", CHAPTER_PATTERN, _build_chapter),
    MarkerRule("numbered", NUMBERED_PATTERN, _build_numbered),
    MarkerRule("part_word", PART_PATTERN, _build_part),
    MarkerRule("front_back_matter", FRONT_BACK_PATTERN, _build_front_back),
    MarkerRule("act_word", ACT_PATTERN, _build_act),
    MarkerRule("roman_numeral", ROMAN_PATTERN, _build_roman),
    MarkerRule("all_caps", ALL_CAPS_PATTERN, _build_all_caps),
)


def classify_line(line: str) -> LineClassification:
    """Classify a single line as a structural marker or plain text.

    Lines that are empty or longer than 100 characters (after stripping
    whitespace and a byte-order mark) are never markers.
    """
    stripped = clean_line(line)

    if not stripped or len(stripped) > MAX_MARKER_LENGTH:
        return NOT_A_MARKER

    for rule in MARKER_RULES:
        match = rule.pattern.match(stripped)
        if match:
            return rule.build(match, stripped)

    return NOT_A_MARKER
