"""Pydantic schemas for Web API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from manuscript_import.core.models import DocumentStructure


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    timestamp: str


# =============================================================================
# DETECTION SCHEMAS
# =============================================================================


class DetectChaptersRequest(BaseModel):
    """Request body for chapter detection.

    ``content`` is validated by the detector so that missing or non-text
    content yields a 400 with a readable message.
    """

    content: Any = None


class ChapterResponse(BaseModel):
    """One detected chapter."""

    index: int
    title: str
    start_offset: int
    end_offset: int
    word_count: int
    preview: str
    type: str
    part_number: int | None = None
    act_number: int | None = None


class ActResponse(BaseModel):
    """One act grouping."""

    number: int
    title: str
    start_chapter_index: int
    end_chapter_index: int


class DetectChaptersResponse(BaseModel):
    """Detected document structure."""

    success: bool = True
    title: str
    chapters: list[ChapterResponse] = Field(default_factory=list)
    acts: list[ActResponse] = Field(default_factory=list)
    total_word_count: int

    @classmethod
    def from_structure(cls, structure: DocumentStructure) -> DetectChaptersResponse:
        data = structure.to_dict()
        return cls(
            title=data["title"],
            chapters=[ChapterResponse(**ch) for ch in data["chapters"]],
            acts=[ActResponse(**act) for act in data["acts"]],
            total_word_count=data["total_word_count"],
        )
