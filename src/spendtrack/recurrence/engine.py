"""Next-occurrence computation for recurring transactions.

Each scheduler tick looks at one recurring definition at a time:

1. Definitions whose end date is not strictly after now are skipped.
2. The anchor is the latest generated instance's date, or the definition's
   own date when nothing has been generated yet.
3. One period is added to the anchor. Months and years follow calendar
   rollover with end-of-month clamping (Jan 31 -> Feb 29/28, Feb 29 -> Feb 28
   the next year). The clamped day becomes the next anchor, so the schedule
   stays on the clamped day afterwards.
4. The occurrence (midnight of the computed date) is due when it falls at or
   before now + lookahead and not after the end date.

At most one instance is produced per call. Missed periods are not backfilled:
a scheduler that runs less often than the period generates one instance per
run, each one period after the previous.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone

from dateutil.relativedelta import relativedelta

from spendtrack.core.exceptions import InvalidRecurrencePatternError
from spendtrack.models.transaction import Transaction

DEFAULT_LOOKAHEAD = timedelta(hours=24)

_PERIODS: dict[str, relativedelta] = {
    "daily": relativedelta(days=1),
    "weekly": relativedelta(days=7),
    "monthly": relativedelta(months=1),
    "yearly": relativedelta(years=1),
}

RECURRENCE_PATTERNS: tuple[str, ...] = tuple(_PERIODS)


def _aware(value: datetime) -> datetime:
    # Naive timestamps (e.g. read back from SQLite) are taken as UTC.
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


def _occurrence_start(occurrence: date, now: datetime) -> datetime:
    return datetime.combine(occurrence, time.min, tzinfo=now.tzinfo)


def next_occurrence(anchor: date, pattern: str | None) -> date:
    """Add one recurrence period to an anchor date.

    Raises:
        InvalidRecurrencePatternError: If pattern is not a known period.
    """
    try:
        period = _PERIODS[pattern]
    except (KeyError, TypeError):
        raise InvalidRecurrencePatternError(pattern) from None
    return anchor + period


def is_due(occurrence: date, now: datetime, lookahead: timedelta = DEFAULT_LOOKAHEAD) -> bool:
    """Whether an occurrence date falls at or before now + lookahead."""
    now = _aware(now)
    return _occurrence_start(occurrence, now) <= now + lookahead


def advance(
    definition: Transaction,
    last_instance_date: date | None,
    now: datetime,
    lookahead: timedelta = DEFAULT_LOOKAHEAD,
) -> Transaction | None:
    """Compute the instance a recurring definition owes at this tick, if any.

    Args:
        definition: Transaction with is_recurring=True.
        last_instance_date: Date of the latest generated instance, or None.
        now: Current time of the tick.
        lookahead: How far past now an occurrence may be and still be created.

    Returns:
        A new, unsaved Transaction instance, or None when nothing is due.

    Raises:
        InvalidRecurrencePatternError: If the definition's pattern is unknown.
    """
    if not definition.is_recurring or definition.recurring_end_date is None:
        return None

    now = _aware(now)
    end = _aware(definition.recurring_end_date)
    if end <= now:
        return None

    anchor = last_instance_date or definition.txn_date
    occurrence = next_occurrence(anchor, definition.recurring_pattern)

    if not is_due(occurrence, now, lookahead):
        return None
    if _occurrence_start(occurrence, now) > end:
        return None

    return Transaction(
        user_id=definition.user_id,
        amount=definition.amount,
        description=definition.description,
        category=definition.category,
        type=definition.type,
        txn_date=occurrence,
        is_recurring=False,
        parent_transaction_id=definition.id,
        created_at=now,
        updated_at=now,
    )
