"""Governance tests: audit entries are complete, JSON-safe and fail loudly."""

from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from herdbook.domain.models.records import AuditAction, CattleStatus, RecordKind
from herdbook.governance.audit_recorder import AuditRecorder, serialize_snapshot
from herdbook.governance.exceptions import AuditError


@pytest.fixture
def recorder(clock):
    return AuditRecorder(clock)


def test_serialize_snapshot_is_json_safe():
    snapshot = serialize_snapshot(
        {
            "date_of_birth": date(2021, 3, 14),
            "current_weight": Decimal("412.50"),
            "status": CattleStatus.ACTIVE,
            "cattle_name": None,
        }
    )
    assert snapshot == {
        "date_of_birth": "2021-03-14",
        "current_weight": "412.50",
        "status": "active",
        "cattle_name": None,
    }


def test_serialize_absent_snapshot():
    assert serialize_snapshot(None) is None


@pytest.mark.asyncio
async def test_record_appends_complete_entry(recorder, clock, manager_ctx):
    repository = AsyncMock()
    repository.append = AsyncMock(return_value=41)

    entry_id = await recorder.record(
        repository,
        manager_ctx,
        action=AuditAction.UPDATE,
        record_kind=RecordKind.CATTLE,
        record_id=5,
        before={"status": CattleStatus.ACTIVE},
        after={"status": CattleStatus.SOLD},
    )

    assert entry_id == 41
    entry = repository.append.await_args.args[0]
    assert entry.actor_id == 2
    assert entry.action is AuditAction.UPDATE
    assert entry.record_kind is RecordKind.CATTLE
    assert entry.record_id == 5
    assert entry.before == {"status": "active"}
    assert entry.after == {"status": "sold"}
    assert entry.timestamp_utc == clock.now()
    assert entry.ip_address == "10.0.0.5"
    assert entry.user_agent == "pytest"
    assert entry.correlation_id == "corr-1"
    assert entry.to_dict()["timestamp_utc"] == clock.now().isoformat()


@pytest.mark.asyncio
async def test_repository_failure_raises_audit_error(recorder, admin_ctx):
    repository = AsyncMock()
    repository.append = AsyncMock(side_effect=RuntimeError("disk full"))

    with pytest.raises(AuditError) as exc_info:
        await recorder.record(
            repository,
            admin_ctx,
            action=AuditAction.DELETE,
            record_kind=RecordKind.FEED,
            record_id=3,
            before={"feed_name": "Hay"},
            after=None,
        )
    assert isinstance(exc_info.value.__cause__, RuntimeError)
    assert "disk full" in exc_info.value.message
