"""AI-assisted structure suggestions.

Sends a bounded prefix of the document to a text-analysis LLM and maps the
JSON reply into typed breakpoints and acts. The reply is validated once at
this boundary (pydantic); downstream code never re-checks fields.

Failures of the service (timeouts, non-success responses, non-JSON bodies,
missing fields) are expected: ``augment`` logs them and returns ``None``.
A single attempt is made per call.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from manuscript_import.core.models import CHAPTER_TYPES, ChapterType
from manuscript_import.llm.client import LLMError

logger = structlog.get_logger(__name__)

DEFAULT_SAMPLE_CHARS = 15000
AI_MAX_TOKENS = 2000
AI_TEMPERATURE = 0.3

SYSTEM_PROMPT = """You are a document structure analyzer. Analyze the given text sample and identify:
1. The document/book title (if detectable)
2. Chapter or section boundaries
3. Any act/part structure

Return JSON:
{
  "title": "detected title or 'Untitled'",
  "hasChapters": boolean,
  "chapterPattern": "description of how chapters are marked",
  "suggestedBreakpoints": [
    { "position": approximate_character_position, "title": "chapter title", "type": "prologue|chapter|epilogue|interlude|part" }
  ],
  "acts": [
    { "number": 1, "title": "Act name", "startsAtChapter": 1, "endsAtChapter": 5 }
  ]
}"""

USER_PROMPT_TEMPLATE = "Analyze this document structure:\n\n{sample}"


class JsonService(Protocol):
    """What the augmenter needs from an LLM client."""

    def simple_json(
        self,
        system_prompt: str,
        user_message: str,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> dict[str, Any]: ...


# =============================================================================
# WIRE SCHEMA
# =============================================================================


class _BreakpointPayload(BaseModel):
    position: int
    title: str | None = None
    type: str | None = None


class _ActPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    number: int
    title: str | None = None
    starts_at_chapter: int = Field(alias="startsAtChapter")
    ends_at_chapter: int = Field(alias="endsAtChapter")


class _StructurePayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str | None = None
    has_chapters: bool | None = Field(default=None, alias="hasChapters")
    chapter_pattern: str | None = Field(default=None, alias="chapterPattern")
    suggested_breakpoints: list[_BreakpointPayload] = Field(alias="suggestedBreakpoints")
    acts: list[_ActPayload] | None = None


# =============================================================================
# TYPED RESULT
# =============================================================================


@dataclass(frozen=True)
class AIBreakpoint:
    """Suggested start of a structural division."""

    position: int
    title: str
    type: ChapterType = "chapter"


@dataclass(frozen=True)
class AIAct:
    """Suggested act grouping, with 0-based inclusive chapter indices."""

    number: int
    title: str
    start_chapter_index: int
    end_chapter_index: int


@dataclass(frozen=True)
class AugmenterResult:
    """Validated AI structure suggestion."""

    breakpoints: tuple[AIBreakpoint, ...]
    title: str | None = None
    has_chapters: bool = False
    chapter_pattern: str | None = None
    acts: tuple[AIAct, ...] = field(default_factory=tuple)


def parse_structure_payload(payload: Any, document_length: int) -> AugmenterResult:
    """Map the raw JSON reply to an AugmenterResult.

    Breakpoints are clamped to the document, sorted and de-duplicated;
    positions at or past the end are dropped so every rebuilt chapter is
    non-empty.

    Raises:
        pydantic.ValidationError: If required fields are missing or mistyped
    """
    parsed = _StructurePayload.model_validate(payload)

    breakpoints: list[AIBreakpoint] = []
    seen: set[int] = set()
    ordered = sorted(parsed.suggested_breakpoints, key=lambda bp: bp.position)
    for raw in ordered:
        position = max(raw.position, 0)
        if position >= document_length or position in seen:
            continue
        seen.add(position)
        chapter_type = raw.type.lower() if raw.type else "chapter"
        breakpoints.append(
            AIBreakpoint(
                position=position,
                title=(raw.title or "").strip() or f"Chapter {len(breakpoints) + 1}",
                type=chapter_type if chapter_type in CHAPTER_TYPES else "chapter",
            )
        )

    acts = tuple(
        AIAct(
            number=act.number,
            title=(act.title or "").strip() or f"Act {act.number}",
            start_chapter_index=act.starts_at_chapter - 1,
            end_chapter_index=act.ends_at_chapter - 1,
        )
        for act in parsed.acts or []
    )

    title = (parsed.title or "").strip() or None

    return AugmenterResult(
        breakpoints=tuple(breakpoints),
        title=title,
        has_chapters=bool(parsed.has_chapters),
        chapter_pattern=parsed.chapter_pattern,
        acts=acts,
    )


class StructureAugmenter:
    """Asks an LLM for chapter breakpoints on a document prefix."""

    def __init__(self, client: JsonService, sample_chars: int = DEFAULT_SAMPLE_CHARS):
        self.client = client
        self.sample_chars = sample_chars

    def augment(self, document: str) -> AugmenterResult | None:
        """Request a structure suggestion.

        Returns:
            AugmenterResult, or None if the service failed in any way
        """
        sample = document[: self.sample_chars]

        logger.info(
            "ai_augmenter.request",
            sample_chars=len(sample),
            document_chars=len(document),
        )

        try:
            payload = self.client.simple_json(
                system_prompt=SYSTEM_PROMPT,
                user_message=USER_PROMPT_TEMPLATE.format(sample=sample),
                temperature=AI_TEMPERATURE,
                max_tokens=AI_MAX_TOKENS,
            )
        except LLMError as e:
            logger.warning("ai_augmenter.failed", reason="service_error", error=str(e))
            return None

        try:
            result = parse_structure_payload(payload, len(document))
        except ValidationError as e:
            logger.warning(
                "ai_augmenter.failed",
                reason="invalid_payload",
                errors=e.error_count(),
            )
            return None

        logger.info(
            "ai_augmenter.done",
            breakpoints=len(result.breakpoints),
            acts=len(result.acts),
            has_chapters=result.has_chapters,
        )
        return result
