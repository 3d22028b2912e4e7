"""Document structure data model.

Entities are created fresh for every detection call and are frozen once
returned; the caller owns persistence.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

ChapterType = Literal["prologue", "chapter", "epilogue", "interlude", "part"]

CHAPTER_TYPES: tuple[str, ...] = ("prologue", "chapter", "epilogue", "interlude", "part")

DEFAULT_TITLE = "Untitled"
FULL_TEXT_TITLE = "Full Text"


@dataclass(frozen=True)
class ChapterCandidate:
    """A detected structural unit spanning [start_offset, end_offset)."""

    index: int
    title: str
    start_offset: int
    end_offset: int
    word_count: int
    preview: str
    type: ChapterType = "chapter"
    part_number: int | None = None
    act_number: int | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {
            "index": self.index,
            "title": self.title,
            "start_offset": self.start_offset,
            "end_offset": self.end_offset,
            "word_count": self.word_count,
            "preview": self.preview,
            "type": self.type,
        }
        if self.part_number is not None:
            result["part_number"] = self.part_number
        if self.act_number is not None:
            result["act_number"] = self.act_number
        return result


@dataclass(frozen=True)
class ActGroup:
    """A run of contiguous chapters (end index inclusive)."""

    number: int
    title: str
    start_chapter_index: int
    end_chapter_index: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "number": self.number,
            "title": self.title,
            "start_chapter_index": self.start_chapter_index,
            "end_chapter_index": self.end_chapter_index,
        }


@dataclass(frozen=True)
class DocumentStructure:
    """Result of structure detection."""

    chapters: tuple[ChapterCandidate, ...]
    total_word_count: int
    title: str = DEFAULT_TITLE
    acts: tuple[ActGroup, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "title": self.title,
            "chapters": [ch.to_dict() for ch in self.chapters],
            "acts": [act.to_dict() for act in self.acts],
            "total_word_count": self.total_word_count,
        }
