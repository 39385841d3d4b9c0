"""Pydantic schemas for the record API. Shape only: field rules live in the domain validators."""

from typing import Optional

from pydantic import BaseModel, ConfigDict

from herdbook.domain.models.records import AuditAction, RecordKind


class RecordFields(BaseModel):
    """
    Form-style payload: every field is an optional string so that the domain
    validators can report every violation at once. Numbers are accepted and
    turned into strings; unknown fields are rejected.
    """

    model_config = ConfigDict(extra="forbid", coerce_numbers_to_str=True)

    def to_fields(self) -> dict:
        return self.model_dump(exclude_unset=True)


class CattleFields(RecordFields):
    # Health and breeding status are owned by their record kinds and not accepted here
    tag_number: Optional[str] = None
    cattle_name: Optional[str] = None
    breed: Optional[str] = None
    date_of_birth: Optional[str] = None
    gender: Optional[str] = None
    current_weight: Optional[str] = None
    assigned_worker: Optional[str] = None
    status: Optional[str] = None
    notes: Optional[str] = None


class HealthRecordFields(RecordFields):
    cattle_id: Optional[str] = None
    date_of_checkup: Optional[str] = None
    health_issue: Optional[str] = None
    symptoms: Optional[str] = None
    diagnosis: Optional[str] = None
    treatment_given: Optional[str] = None
    treatment_cost: Optional[str] = None
    medications: Optional[str] = None
    next_checkup_date: Optional[str] = None
    attended_by: Optional[str] = None
    notes: Optional[str] = None
    status: Optional[str] = None


class BreedingRecordFields(RecordFields):
    cattle_id: Optional[str] = None
    breeding_date: Optional[str] = None
    breeding_type: Optional[str] = None
    sire_details: Optional[str] = None
    semen_batch: Optional[str] = None
    technician_id: Optional[str] = None
    breeding_cost: Optional[str] = None
    notes: Optional[str] = None
    status: Optional[str] = None
    pregnancy_status: Optional[str] = None
    pregnancy_check_date: Optional[str] = None
    calving_date: Optional[str] = None
    calf_tag_number: Optional[str] = None


class FeedFields(RecordFields):
    feed_name: Optional[str] = None
    feed_type: Optional[str] = None
    description: Optional[str] = None
    supplier: Optional[str] = None
    unit_of_measure: Optional[str] = None
    unit_cost: Optional[str] = None
    current_quantity: Optional[str] = None
    reorder_level: Optional[str] = None
    expiry_date: Optional[str] = None
    storage_location: Optional[str] = None
    notes: Optional[str] = None


class WorkerFields(RecordFields):
    full_name: Optional[str] = None
    email: Optional[str] = None
    phone_number: Optional[str] = None
    id_number: Optional[str] = None
    role: Optional[str] = None
    date_hired: Optional[str] = None
    salary: Optional[str] = None
    assigned_duties: Optional[str] = None
    status: Optional[str] = None
    password: Optional[str] = None
    confirm_password: Optional[str] = None
    new_password: Optional[str] = None


class MutationResponse(BaseModel):
    """Response for every committed create, update or delete."""

    kind: RecordKind
    action: AuditAction
    record_id: int
    message: str
    version: Optional[int] = None
