"""Breeding record handler. Owns cattle.breeding_status, last_breeding_date and expected_delivery_date."""

from typing import Any, Dict, List, Mapping, Optional, Tuple

from herdbook.application.handlers.base import RecordHandler
from herdbook.application.repositories import BreedingRecordRepository, UnitOfWork
from herdbook.domain.derivations import breeding_status_for, expected_delivery_date
from herdbook.domain.models.records import (
    BreedingRecord,
    BreedingStatus,
    CattleStatus,
    Gender,
    Operation,
    RecordKind,
)
from herdbook.domain.validators.record_validator import (
    VETERINARIAN_ROLES,
    validate_breeding_record_fields,
)


class BreedingRecordHandler(RecordHandler[BreedingRecord]):
    kind = RecordKind.BREEDING_RECORD
    label = "Breeding record"
    audit_fields = (
        "cattle_id",
        "breeding_date",
        "breeding_type",
        "breeding_cost",
        "status",
        "expected_date",
    )

    def repository(self, uow: UnitOfWork) -> BreedingRecordRepository:
        return uow.breeding_records

    async def validate(
        self,
        uow: UnitOfWork,
        fields: Mapping[str, Any],
        *,
        current: Optional[BreedingRecord],
    ) -> Tuple[Dict[str, Any], List[str]]:
        values, errors = validate_breeding_record_fields(fields, creating=current is None)
        cattle_id = values.get("cattle_id")
        if cattle_id is not None:
            cattle = await uow.cattle.get(cattle_id)
            if cattle is None:
                errors.append("Selected cattle does not exist")
            else:
                if self.references_changed(values, current, "cattle_id") and cattle.status is not CattleStatus.ACTIVE:
                    errors.append("Selected cattle is not active")
                if cattle.gender is not Gender.FEMALE:
                    errors.append("Breeding records require a female animal")
        if self.references_changed(values, current, "technician_id") and not await uow.user_accounts.is_active(
            values["technician_id"], roles=VETERINARIAN_ROLES
        ):
            errors.append("Selected technician does not exist")
        return values, errors

    def derive(self, values: Dict[str, Any], *, current: Optional[BreedingRecord]) -> Dict[str, Any]:
        values["expected_date"] = expected_delivery_date(values["breeding_date"])
        return values

    async def propagate(
        self,
        uow: UnitOfWork,
        operation: Operation,
        record: BreedingRecord,
        previous: Optional[BreedingRecord],
    ) -> None:
        source: Optional[BreedingRecord] = record
        if operation is Operation.DELETE:
            source = await uow.breeding_records.latest_for_cattle(record.cattle_id)
        if source is None:
            await uow.cattle.set_breeding_status(
                record.cattle_id,
                breeding_status=BreedingStatus.OPEN,
                last_breeding_date=None,
                expected_delivery_date=None,
            )
            return
        breeding_status = breeding_status_for(source.status, source.pregnancy_status)
        # An open animal has no delivery to expect
        delivery = None if breeding_status is BreedingStatus.OPEN else source.expected_date
        await uow.cattle.set_breeding_status(
            record.cattle_id,
            breeding_status=breeding_status,
            last_breeding_date=source.breeding_date,
            expected_delivery_date=delivery,
        )
