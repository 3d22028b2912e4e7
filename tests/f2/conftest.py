"""Fixtures for F2 tests - AI augmentation and reconciliation."""

from typing import Any
from unittest.mock import MagicMock

import pytest

from manuscript_import.config.app_config import DetectorConfig
from manuscript_import.core.ai_augmenter import StructureAugmenter


@pytest.fixture
def detector_config() -> DetectorConfig:
    """Default detector settings."""
    return DetectorConfig()


@pytest.fixture
def breakpoint_payload(sparse_document) -> dict[str, Any]:
    """AI reply suggesting four chapters and two acts in the sparse document."""
    length = len(sparse_document)
    return {
        "title": "The Lighthouse Keeper",
        "hasChapters": False,
        "chapterPattern": "No explicit markers; breaks inferred from scene changes",
        "suggestedBreakpoints": [
            {"position": 0, "title": "Arrival", "type": "chapter"},
            {"position": length // 4, "title": "The Storm", "type": "chapter"},
            {"position": length // 2, "title": "Wreckage", "type": "chapter"},
            {"position": 3 * length // 4, "title": "Afterward", "type": "epilogue"},
        ],
        "acts": [
            {"number": 1, "title": "Calm", "startsAtChapter": 1, "endsAtChapter": 2},
            {"number": 2, "title": "Storm", "startsAtChapter": 3, "endsAtChapter": 4},
        ],
    }


@pytest.fixture
def mock_llm_client(breakpoint_payload):
    """Mock LLM client that returns the breakpoint payload without calling a real LLM."""
    client = MagicMock()
    client.config = MagicMock()
    client.config.provider = "openai"
    client.config.model = "test-model"
    client.simple_json.return_value = breakpoint_payload
    return client


@pytest.fixture
def augmenter(mock_llm_client) -> StructureAugmenter:
    """Augmenter wired to the mock client."""
    return StructureAugmenter(mock_llm_client)
