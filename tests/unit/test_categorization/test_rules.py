from uuid import uuid4

from spendtrack.categorization.rules import (
    FALLBACK_CATEGORIES,
    UNCATEGORIZED,
    categorize,
    classify,
    score_fallback,
)
from spendtrack.models.category_rule import CategoryRule


def make_rule(keywords, category, priority=0, enabled=True) -> CategoryRule:
    return CategoryRule(
        id=uuid4(),
        user_id=uuid4(),
        keywords=keywords,
        category=category,
        priority=priority,
        enabled=enabled,
    )


def test_categorize_rule_match() -> None:
    rules = [make_rule(["starbucks"], "dining", priority=10)]
    assert categorize("Starbucks Coffee", rules) == "dining"


def test_categorize_rule_keyword_is_case_insensitive() -> None:
    rules = [make_rule(["NETFLIX.COM"], "streaming")]
    assert categorize("netflix.com monthly", rules) == "streaming"


def test_categorize_whole_foods_falls_back_to_groceries() -> None:
    assert categorize("Whole Foods Market", []) == "groceries"


def test_categorize_unknown_vendor_is_uncategorized() -> None:
    assert categorize("xyz123 unknown vendor", []) == UNCATEGORIZED


def test_categorize_empty_and_missing_description() -> None:
    rules = [make_rule(["coffee"], "dining")]
    assert categorize("", rules) == UNCATEGORIZED
    assert categorize(None, rules) == UNCATEGORIZED


def test_highest_priority_rule_wins_over_better_match() -> None:
    # The low-priority rule matches more keywords but is never reached.
    rules = [
        make_rule(["amazon", "prime", "video"], "entertainment", priority=1),
        make_rule(["amazon"], "shopping", priority=5),
    ]
    assert categorize("Amazon Prime Video", rules) == "shopping"


def test_rules_are_ordered_by_priority_not_input_order() -> None:
    rules = [
        make_rule(["uber"], "travel", priority=1),
        make_rule(["uber eats"], "dining", priority=20),
    ]
    result = classify("UBER EATS order 42", rules)
    assert result.category == "dining"
    assert result.source == "rule"
    assert result.rule_id == rules[1].id
    assert result.matched_keyword == "uber eats"


def test_equal_priority_keeps_input_order() -> None:
    first = make_rule(["market"], "groceries", priority=3)
    second = make_rule(["market"], "shopping", priority=3)
    assert categorize("Farmers Market", [first, second]) == "groceries"
    assert categorize("Farmers Market", [second, first]) == "shopping"


def test_disabled_rules_are_ignored() -> None:
    rules = [make_rule(["starbucks"], "coffee", priority=100, enabled=False)]
    result = classify("Starbucks Coffee", rules)
    assert result.source != "rule"
    assert result.category == UNCATEGORIZED


def test_empty_keyword_never_matches() -> None:
    rules = [make_rule(["", "zzz"], "never", priority=1)]
    assert categorize("anything at all", rules) == UNCATEGORIZED


def test_rule_match_beats_fallback() -> None:
    rules = [make_rule(["whole foods"], "treats")]
    assert categorize("Whole Foods Market", rules) == "treats"


def test_fallback_highest_score_wins() -> None:
    # shopping: amazon + store = 2; nothing else scores 2.
    result = classify("Amazon store pickup", [])
    assert result.category == "shopping"
    assert result.source == "fallback"


def test_fallback_tie_goes_to_first_table_entry() -> None:
    # "hotel" scores 1 for both dining and transportation; dining is listed first.
    assert dict(score_fallback("Hilton Hotel"))["dining"] == 1
    assert dict(score_fallback("Hilton Hotel"))["transportation"] == 1
    assert categorize("Hilton Hotel", []) == "dining"


def test_fallback_later_category_wins_with_strictly_higher_score() -> None:
    # dining: hotel = 1; transportation: hotel + parking + airline = 3.
    assert categorize("Airline hotel parking", []) == "transportation"


def test_gas_bill_counts_for_both_keywords() -> None:
    scores = dict(score_fallback("City gas bill"))
    assert scores["utilities"] == 1
    assert scores["transportation"] == 1
    # Tie on 1: transportation is listed before utilities.
    assert categorize("City gas bill", []) == "transportation"


def test_score_fallback_follows_table_order() -> None:
    assert [category for category, _ in score_fallback("x")] == list(FALLBACK_CATEGORIES)
    assert all(score == 0 for _, score in score_fallback("x"))


def test_uncategorized_source() -> None:
    result = classify("xyz123 unknown vendor")
    assert result.category == UNCATEGORIZED
    assert result.source == "uncategorized"
    assert result.rule_id is None


def test_categorize_is_deterministic() -> None:
    rules = [
        make_rule(["coffee"], "dining", priority=2),
        make_rule(["bean"], "groceries", priority=2),
    ]
    outputs = {categorize("Coffee Bean supermarket", rules) for _ in range(20)}
    assert outputs == {"dining"}
