"""Core structure detection modules.

- number_decoder: Numeral token decoding
- pattern_classifier: Structural marker detection per line
- segmenter: Rule-based chapter segmentation
- ai_augmenter: LLM structure suggestions
- reconciler: Merge rule-based and AI results, infer title and acts
- structure_detector: Entry point
"""

__all__ = [
    "number_decoder",
    "pattern_classifier",
    "segmenter",
    "ai_augmenter",
    "reconciler",
    "structure_detector",
]
