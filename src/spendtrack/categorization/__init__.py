"""Transaction categorization.

Deterministic and local: user keyword rules first, then a static
keyword-frequency table. No network calls.
"""

from .rules import (
    FALLBACK_CATEGORIES,
    UNCATEGORIZED,
    ClassificationResult,
    categorize,
    classify,
    score_fallback,
)

__all__ = [
    "FALLBACK_CATEGORIES",
    "UNCATEGORIZED",
    "ClassificationResult",
    "categorize",
    "classify",
    "score_fallback",
]
