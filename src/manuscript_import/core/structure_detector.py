"""Document structure detection entry point.

Validates input, runs the rule-based segmenter, invokes the AI augmenter
only for sparse results, and reconciles both into a DocumentStructure.

Usage:
    detector = StructureDetector(augmenter=StructureAugmenter(LLMClient()))
    structure = detector.detect(text)
"""

from __future__ import annotations

import structlog

from manuscript_import.config.app_config import DetectorConfig, load_app_config
from manuscript_import.core.ai_augmenter import StructureAugmenter
from manuscript_import.core.models import DocumentStructure
from manuscript_import.core.reconciler import needs_augmentation, reconcile
from manuscript_import.core.segmenter import segment_document
from manuscript_import.llm.client import LLMClient, LLMConfig
from manuscript_import.utils.text_utils import count_words
from manuscript_import.utils.validators import (
    InputError,
    StructureDetectionError,
    validate_content,
)

logger = structlog.get_logger(__name__)

__all__ = [
    "InputError",
    "StructureDetectionError",
    "StructureDetector",
    "build_detector",
]


class StructureDetector:
    """Detects the chapter/act hierarchy of a plain-text manuscript.

    Holds no per-document state; one instance may serve concurrent calls.
    Without an augmenter the detector is deterministic.
    """

    def __init__(
        self,
        augmenter: StructureAugmenter | None = None,
        config: DetectorConfig | None = None,
    ):
        self.config = config or DetectorConfig()
        self.augmenter = augmenter if self.config.ai_enabled else None

    def detect(self, content: object) -> DocumentStructure:
        """Detect the structure of a document.

        Args:
            content: Plain-text document

        Returns:
            Fully populated DocumentStructure

        Raises:
            InputError: If content is missing, not text, or too short
        """
        document = validate_content(content, self.config.min_content_length)

        logger.info("structure_detector.start", length=len(document))

        chapters = segment_document(document, self.config.preview_chars)
        total_words = count_words(document)

        ai_result = None
        if self.augmenter is not None and needs_augmentation(
            len(chapters), total_words, self.config
        ):
            ai_result = self.augmenter.augment(document)

        structure = reconcile(document, chapters, ai_result, total_words, self.config)

        logger.info(
            "structure_detector.done",
            chapters=len(structure.chapters),
            acts=len(structure.acts),
            words=structure.total_word_count,
            ai_used=ai_result is not None,
        )
        return structure


def build_detector(
    use_ai: bool = True,
    provider: str | None = None,
    model: str | None = None,
) -> StructureDetector:
    """Build a detector from the application config.

    The AI augmenter is attached only when enabled and the provider has
    the credentials it needs.

    Raises:
        LLMError: If ``provider`` is not in the providers table
    """
    app_config = load_app_config()
    detector_config = app_config.detector

    augmenter = None
    if use_ai and detector_config.ai_enabled:
        llm_config = LLMConfig.from_app_config(app_config, provider=provider, model=model)
        if llm_config.is_configured():
            augmenter = StructureAugmenter(
                LLMClient(llm_config), sample_chars=detector_config.ai_sample_chars
            )
        else:
            logger.info("structure_detector.ai_unavailable", provider=llm_config.provider)

    return StructureDetector(augmenter=augmenter, config=detector_config)
