"""Detector instance shared by the web routes."""

from __future__ import annotations

from manuscript_import.core.structure_detector import StructureDetector, build_detector

_detector: StructureDetector | None = None


def get_detector() -> StructureDetector:
    """Get the global detector, building it from config on first use."""
    global _detector
    if _detector is None:
        _detector = build_detector()
    return _detector


def set_detector(detector: StructureDetector) -> None:
    """Replace the global detector (for testing or custom services)."""
    global _detector
    _detector = detector


def reset_detector() -> None:
    """Reset the detector (for testing)."""
    global _detector
    _detector = None
