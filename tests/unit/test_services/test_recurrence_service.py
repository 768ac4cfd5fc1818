"""Unit tests for RecurrenceService."""

import asyncio
import gc
from datetime import date, datetime, timezone
from unittest.mock import AsyncMock, Mock
from uuid import uuid4

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from spendtrack.models.transaction import Transaction
from spendtrack.services.recurrence import RecurrenceService, _definition_locks, _lock_for

NOW = datetime(2024, 2, 14, tzinfo=timezone.utc)


def make_definition(**overrides) -> Transaction:
    fields = dict(
        id=uuid4(),
        user_id=uuid4(),
        amount=120000,
        description="Rent",
        category="housing",
        type="expense",
        txn_date=date(2024, 1, 15),
        is_recurring=True,
        recurring_pattern="monthly",
        recurring_end_date=datetime(2024, 12, 31, tzinfo=timezone.utc),
    )
    fields.update(overrides)
    return Transaction(**fields)


async def _assign_id(obj):
    obj.id = uuid4()
    return obj


class FakeTransactionRepository:
    """In-memory stand-in for TransactionRepository."""

    def __init__(self, definitions):
        self.definitions = definitions
        self.instances: list[Transaction] = []

    async def get_active_recurring_definitions(self, now):
        return [d for d in self.definitions if d.recurring_end_date > now]

    async def get_latest_instance(self, definition_id):
        own = [i for i in self.instances if i.parent_transaction_id == definition_id]
        return max(own, key=lambda i: i.txn_date, default=None)

    async def create(self, obj):
        await asyncio.sleep(0)
        obj.id = uuid4()
        self.instances.append(obj)
        return obj


@pytest.fixture
def mock_db():
    db = AsyncMock(spec=AsyncSession)
    db.expunge = Mock()
    db.rollback = AsyncMock()
    return db


@pytest.fixture
def service(mock_db):
    service = RecurrenceService(mock_db)
    service.transaction_repo = AsyncMock()
    service.transaction_repo.get_latest_instance.return_value = None
    service.transaction_repo.create.side_effect = _assign_id
    return service


class TestRunTick:
    @pytest.mark.asyncio
    async def test_creates_due_instance(self, service, mock_db):
        definition = make_definition()
        service.transaction_repo.get_active_recurring_definitions.return_value = [definition]

        result = await service.run_tick(NOW)

        assert result.checked == 1
        assert len(result.created) == 1
        assert result.failures == []
        instance = service.transaction_repo.create.await_args.args[0]
        assert instance.txn_date == date(2024, 2, 15)
        assert instance.parent_transaction_id == definition.id
        mock_db.expunge.assert_called_once_with(definition)

    @pytest.mark.asyncio
    async def test_counts_not_due(self, service):
        service.transaction_repo.get_active_recurring_definitions.return_value = [make_definition()]

        result = await service.run_tick(datetime(2024, 2, 10, tzinfo=timezone.utc))

        assert result.created == []
        assert result.not_due == 1
        service.transaction_repo.create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_uses_latest_instance_as_anchor(self, service):
        definition = make_definition()
        service.transaction_repo.get_active_recurring_definitions.return_value = [definition]
        service.transaction_repo.get_latest_instance.return_value = Transaction(
            txn_date=date(2024, 2, 15), parent_transaction_id=definition.id
        )

        result = await service.run_tick(datetime(2024, 3, 14, 12, tzinfo=timezone.utc))

        assert len(result.created) == 1
        instance = service.transaction_repo.create.await_args.args[0]
        assert instance.txn_date == date(2024, 3, 15)

    @pytest.mark.asyncio
    async def test_write_failure_is_isolated(self, service, mock_db):
        failing, healthy = make_definition(), make_definition(description="Gym")
        service.transaction_repo.get_active_recurring_definitions.return_value = [failing, healthy]

        async def create(obj):
            if obj.parent_transaction_id == failing.id:
                raise OperationalError("INSERT", {}, Exception("disk full"))
            return await _assign_id(obj)

        service.transaction_repo.create.side_effect = create

        result = await service.run_tick(NOW)

        assert result.checked == 2
        assert len(result.created) == 1
        assert len(result.failures) == 1
        failure = result.failures[0]
        assert failure.definition_id == failing.id
        assert failure.error_code == "REC_002"
        assert failure.message == "Failed to materialize recurring transaction instance"
        mock_db.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_anchor_lookup_failure_is_isolated(self, service):
        first, second = make_definition(), make_definition()
        service.transaction_repo.get_active_recurring_definitions.return_value = [first, second]
        service.transaction_repo.get_latest_instance.side_effect = [ConnectionError("timeout"), None]

        result = await service.run_tick(NOW)

        assert [f.error_code for f in result.failures] == ["REC_002"]
        assert len(result.created) == 1

    @pytest.mark.asyncio
    async def test_unknown_pattern_is_skipped(self, service, mock_db):
        broken = make_definition(recurring_pattern="fortnightly")
        healthy = make_definition()
        service.transaction_repo.get_active_recurring_definitions.return_value = [broken, healthy]

        result = await service.run_tick(NOW)

        assert len(result.failures) == 1
        assert result.failures[0].definition_id == broken.id
        assert result.failures[0].error_code == "REC_001"
        assert len(result.created) == 1
        instance = service.transaction_repo.create.await_args.args[0]
        assert instance.parent_transaction_id == healthy.id
        mock_db.rollback.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_definition_load_failure_propagates(self, service):
        service.transaction_repo.get_active_recurring_definitions.side_effect = ConnectionError("down")

        with pytest.raises(ConnectionError):
            await service.run_tick(NOW)

    @pytest.mark.asyncio
    async def test_defaults_now_to_current_time(self, service):
        service.transaction_repo.get_active_recurring_definitions.return_value = []

        result = await service.run_tick()

        assert result.ran_at.tzinfo is not None
        assert result.checked == 0


class TestIdempotence:
    @pytest.mark.asyncio
    async def test_repeated_tick_creates_one_instance(self, mock_db):
        definition = make_definition()
        service = RecurrenceService(mock_db)
        service.transaction_repo = FakeTransactionRepository([definition])

        first = await service.run_tick(NOW)
        second = await service.run_tick(NOW)

        assert len(first.created) == 1
        assert second.created == []
        assert second.not_due == 1
        assert [i.txn_date for i in service.transaction_repo.instances] == [date(2024, 2, 15)]

    @pytest.mark.asyncio
    async def test_monthly_ticks_follow_clamped_day(self, mock_db):
        definition = make_definition(txn_date=date(2024, 1, 31))
        service = RecurrenceService(mock_db)
        service.transaction_repo = FakeTransactionRepository([definition])

        for now in (
            datetime(2024, 2, 28, 12, tzinfo=timezone.utc),
            datetime(2024, 3, 28, 12, tzinfo=timezone.utc),
        ):
            await service.run_tick(now)

        assert [i.txn_date for i in service.transaction_repo.instances] == [
            date(2024, 2, 29),
            date(2024, 3, 29),
        ]

    @pytest.mark.asyncio
    async def test_overlapping_ticks_create_one_instance(self, mock_db):
        repo = FakeTransactionRepository([make_definition()])
        first, second = RecurrenceService(mock_db), RecurrenceService(mock_db)
        first.transaction_repo = second.transaction_repo = repo

        results = await asyncio.gather(first.run_tick(NOW), second.run_tick(NOW))

        assert sum(len(r.created) for r in results) == 1
        assert len(repo.instances) == 1


class TestDefinitionLocks:
    def test_lock_shared_while_held(self):
        definition_id = uuid4()
        lock = _lock_for(definition_id)

        assert _lock_for(definition_id) is lock

    def test_lock_released_when_unused(self):
        definition_id = uuid4()
        lock = _lock_for(definition_id)
        del lock
        gc.collect()

        assert definition_id not in _definition_locks

    @pytest.mark.asyncio
    async def test_tick_leaves_no_locks_behind(self, mock_db):
        definition = make_definition()
        service = RecurrenceService(mock_db)
        service.transaction_repo = FakeTransactionRepository([definition])

        await service.run_tick(NOW)
        gc.collect()

        assert definition.id not in _definition_locks
