"""Deterministic transaction categorization.

A description is resolved in two stages:

1. The user's enabled keyword rules, highest priority first. The first keyword
   found in the description decides, even if a lower-priority rule would match
   more keywords.
2. A static keyword-frequency table. Each category scores one point per
   keyword present in the description; the highest score wins and ties go to
   the category listed first.

Matching is case-insensitive substring containment in both stages.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Protocol
from uuid import UUID

UNCATEGORIZED = "uncategorized"

SOURCE_RULE = "rule"
SOURCE_FALLBACK = "fallback"
SOURCE_NONE = "uncategorized"


# Ordering matters: on equal scores the earlier entry wins.
_FALLBACK_TABLE: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("groceries", ("grocery", "supermarket", "whole foods", "trader joe", "safeway", "kroger", "costco")),
    ("dining", ("restaurant", "cafe", "pizza", "burger", "sushi", "bar", "pub", "hotel", "doordash", "uber eats", "grubhub")),
    ("transportation", ("uber", "lyft", "gas", "parking", "transit", "amtrak", "airline", "hotel")),
    ("utilities", ("electric", "water", "internet", "phone", "gas bill", "utility")),
    ("entertainment", ("movie", "theater", "concert", "spotify", "netflix", "gaming", "steam")),
    ("shopping", ("amazon", "target", "walmart", "mall", "store", "shop")),
    ("healthcare", ("doctor", "pharmacy", "hospital", "clinic", "dental", "medical")),
    ("fitness", ("gym", "yoga", "trainer", "sport")),
    ("subscriptions", ("subscription", "membership", "plan")),
    ("salary", ("salary", "paycheck", "wage", "bonus", "payment")),
    ("freelance", ("freelance", "contract", "invoice", "gig")),
)

FALLBACK_CATEGORIES: tuple[str, ...] = tuple(category for category, _ in _FALLBACK_TABLE)


class Rule(Protocol):
    """Shape of a category rule as seen by the matcher (CategoryRule satisfies it)."""

    id: UUID
    keywords: list[str]
    category: str
    priority: int
    enabled: bool


@dataclass(frozen=True)
class ClassificationResult:
    """Outcome of categorizing one description.

    Attributes:
        category: Category label to store on the transaction.
        source: "rule", "fallback" or "uncategorized".
        rule_id: ID of the matching rule when source is "rule".
        matched_keyword: Keyword that decided a rule match.
    """

    category: str
    source: str
    rule_id: UUID | None = None
    matched_keyword: str | None = None


def _lower(text: str | None) -> str:
    return (text or "").lower()


def _in_evaluation_order(rules: Iterable[Rule]) -> list[Rule]:
    # sorted() is stable, so equal priorities keep the caller's order.
    return sorted(
        (rule for rule in rules if rule.enabled),
        key=lambda rule: rule.priority,
        reverse=True,
    )


def match_rules(description: str | None, rules: Iterable[Rule]) -> ClassificationResult | None:
    """Find the first enabled rule with a keyword contained in the description.

    Args:
        description: Free-text transaction description.
        rules: The user's rules, in any order.

    Returns:
        A rule-sourced result, or None when no rule matches.
    """
    text = _lower(description)
    if not text:
        return None

    for rule in _in_evaluation_order(rules):
        for keyword in rule.keywords or ():
            needle = _lower(keyword)
            if needle and needle in text:
                return ClassificationResult(
                    category=rule.category,
                    source=SOURCE_RULE,
                    rule_id=rule.id,
                    matched_keyword=keyword,
                )
    return None


def score_fallback(description: str | None) -> list[tuple[str, int]]:
    """Score every fallback category against a description, in table order."""
    text = _lower(description)
    return [
        (category, sum(1 for keyword in keywords if keyword in text))
        for category, keywords in _FALLBACK_TABLE
    ]


def classify_fallback(description: str | None) -> ClassificationResult:
    """Categorize using only the static keyword-frequency table."""
    best_category, best_score = None, 0
    for category, score in score_fallback(description):
        # Strictly greater: the first category to reach the max keeps it.
        if score > best_score:
            best_category, best_score = category, score

    if best_category is None:
        return ClassificationResult(category=UNCATEGORIZED, source=SOURCE_NONE)
    return ClassificationResult(category=best_category, source=SOURCE_FALLBACK)


def classify(description: str | None, rules: Iterable[Rule] = ()) -> ClassificationResult:
    """Categorize a description, reporting where the category came from.

    Args:
        description: Free-text transaction description.
        rules: The user's category rules. Disabled rules are ignored.

    Returns:
        ClassificationResult for the description.
    """
    return match_rules(description, rules) or classify_fallback(description)


def categorize(description: str | None, rules: Iterable[Rule] = ()) -> str:
    """Infer a category label from a transaction description.

    Returns:
        The matching rule's category, a fallback table category, or
        "uncategorized".
    """
    return classify(description, rules).category
