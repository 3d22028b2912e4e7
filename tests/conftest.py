"""Pytest configuration for phased testing.

Tests are organized by phase:
- f1: rule-based core (decoder, classifier, segmenter)
- f2: AI path, reconciliation and the detector entry point
- f3: configuration, Web API and CLI

Future phase tests are automatically skipped.
"""

import pytest

# Current implementation phase
CURRENT_PHASE = 3

PROSE_LINE = (
    "The rain fell softly over the quiet harbor town while the lamplighters "
    "made their slow rounds along the sea wall and the fishing boats knocked "
    "against the pier."
)
SHORT_PROSE_LINE = "The rain fell softly over the quiet harbor town while lamps were lit."


def pytest_collection_modifyitems(config, items):
    """Skip tests from phases that haven't been implemented yet."""
    for item in items:
        # Extract phase from path (tests/f2/... -> 2)
        parts = item.fspath.strpath.split("/")
        for part in parts:
            if part.startswith("f") and part[1:].isdigit():
                test_phase = int(part[1:])
                if test_phase > CURRENT_PHASE:
                    item.add_marker(
                        pytest.mark.skip(
                            reason=f"Phase F{test_phase} not yet implemented (current: F{CURRENT_PHASE})"
                        )
                    )
                break


def prose(lines: int, line: str = PROSE_LINE) -> str:
    """Build a paragraph of `lines` identical prose lines."""
    return "\n".join([line] * lines)


@pytest.fixture
def two_chapter_document() -> str:
    """Two 'Chapter N' markers, each followed by prose."""
    return "Chapter 1\n" + prose(4) + "\nChapter 2\n" + prose(4) + "\n"


@pytest.fixture
def structured_document() -> str:
    """Prologue, two parts with chapters, and an epilogue."""
    sections = [
        "Prologue",
        "Part One: Winter",
        "Chapter 1",
        "Chapter 2: The Storm",
        "Part Two: Spring",
        "Chapter 3",
        "Epilogue",
    ]
    return "".join(f"{marker}\n{prose(3)}\n\n" for marker in sections)


@pytest.fixture
def unmarked_document() -> str:
    """Prose without any structural marker (>500 chars, <5000 words)."""
    return prose(12)


@pytest.fixture
def sparse_document() -> str:
    """Single unmarked block of about 5,200 words with a title line."""
    return "The Lighthouse Keeper\n\n" + prose(400, SHORT_PROSE_LINE) + "\n"


@pytest.fixture
def make_prose():
    """Expose the prose builder to tests."""
    return prose
