"""Health record handler. Owns cattle.health_status, last_checkup and next_checkup."""

from typing import Any, Dict, List, Mapping, Optional, Tuple

from herdbook.application.handlers.base import RecordHandler
from herdbook.application.repositories import HealthRecordRepository, UnitOfWork
from herdbook.domain.derivations import health_status_for
from herdbook.domain.models.records import (
    CattleStatus,
    HealthRecord,
    HealthStatus,
    Operation,
    RecordKind,
)
from herdbook.domain.validators.record_validator import (
    VETERINARIAN_ROLES,
    validate_health_record_fields,
)


class HealthRecordHandler(RecordHandler[HealthRecord]):
    kind = RecordKind.HEALTH_RECORD
    label = "Health record"
    audit_fields = ("cattle_id", "date_of_checkup", "health_issue", "treatment_cost", "status")

    def repository(self, uow: UnitOfWork) -> HealthRecordRepository:
        return uow.health_records

    async def validate(
        self,
        uow: UnitOfWork,
        fields: Mapping[str, Any],
        *,
        current: Optional[HealthRecord],
    ) -> Tuple[Dict[str, Any], List[str]]:
        values, errors = validate_health_record_fields(fields, creating=current is None)
        cattle_id = values.get("cattle_id")
        if cattle_id is not None:
            cattle = await uow.cattle.get(cattle_id)
            if cattle is None:
                errors.append("Selected cattle does not exist")
            elif self.references_changed(values, current, "cattle_id") and cattle.status is not CattleStatus.ACTIVE:
                errors.append("Selected cattle is not active")
        if self.references_changed(values, current, "attended_by") and not await uow.user_accounts.is_active(
            values["attended_by"], roles=VETERINARIAN_ROLES
        ):
            errors.append("Attending veterinarian does not exist")
        return values, errors

    async def propagate(
        self,
        uow: UnitOfWork,
        operation: Operation,
        record: HealthRecord,
        previous: Optional[HealthRecord],
    ) -> None:
        source: Optional[HealthRecord] = record
        if operation is Operation.DELETE:
            source = await uow.health_records.latest_for_cattle(record.cattle_id)
        if source is None:
            await uow.cattle.set_health_status(
                record.cattle_id,
                health_status=HealthStatus.HEALTHY,
                last_checkup=None,
                next_checkup=None,
            )
            return
        await uow.cattle.set_health_status(
            record.cattle_id,
            health_status=health_status_for(source.status),
            last_checkup=source.date_of_checkup,
            next_checkup=source.next_checkup_date,
        )
