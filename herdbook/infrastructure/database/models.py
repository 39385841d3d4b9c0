# herdbook/infrastructure/database/models.py

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    JSON,
    Numeric,
    String,
    Text,
    text,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import declared_attr
from sqlalchemy.sql import func

from herdbook.domain.models.records import (
    AuditAction,
    BreedingRecordStatus,
    BreedingStatus,
    BreedingType,
    CattleStatus,
    FeedTransactionType,
    FeedType,
    Gender,
    HealthRecordStatus,
    HealthStatus,
    PregnancyStatus,
    RecordKind,
    StockStatus,
    UnitOfMeasure,
    WorkerStatus,
)
from herdbook.infrastructure.database.session import Base

LIVE_ROWS = text("is_deleted = false")
# JSONB on PostgreSQL, plain JSON elsewhere
SNAPSHOT = JSON().with_variant(JSONB(), "postgresql")


def _enum(enum_cls):
    """Store enum values as plain strings; the ORM hands back enum members."""
    return Enum(
        enum_cls,
        native_enum=False,
        values_callable=lambda members: [m.value for m in members],
        length=32,
    )


class BaseModel(Base):
    __abstract__ = True

    id = Column(Integer, primary_key=True, autoincrement=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    is_deleted = Column(Boolean, nullable=False, default=False, server_default=text("false"))


class VersionedModel(BaseModel):
    """Rows edited through the record service. The ORM bumps version on every flushed update."""

    __abstract__ = True

    version = Column(Integer, nullable=False, default=1)

    @declared_attr
    def __mapper_args__(cls):
        return {"version_id_col": cls.__table__.c.version}


class UserRow(BaseModel):
    """Login account. Worker accounts are written only through the worker register."""

    __tablename__ = "users"

    username = Column(String(100), nullable=False)
    password_hash = Column(String(255), nullable=False)
    full_name = Column(String(200), nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    phone_number = Column(String(20), nullable=True)
    role = Column(String(20), nullable=False)
    status = Column(_enum(WorkerStatus), nullable=False, default=WorkerStatus.ACTIVE)


class CattleRow(VersionedModel):
    __tablename__ = "cattle"
    __table_args__ = (
        Index(
            "uq_cattle_tag_number_live",
            "tag_number",
            unique=True,
            postgresql_where=LIVE_ROWS,
            sqlite_where=LIVE_ROWS,
        ),
    )

    tag_number = Column(String(50), nullable=False)
    cattle_name = Column(String(100), nullable=True)
    breed = Column(String(100), nullable=False)
    date_of_birth = Column(Date, nullable=False)
    gender = Column(_enum(Gender), nullable=False)
    current_weight = Column(Numeric(10, 2), nullable=True)
    assigned_worker = Column(Integer, ForeignKey("users.id"), nullable=True)
    status = Column(_enum(CattleStatus), nullable=False, default=CattleStatus.ACTIVE)
    notes = Column(Text, nullable=True)

    # Owned by health and breeding record mutations
    health_status = Column(_enum(HealthStatus), nullable=False, default=HealthStatus.HEALTHY)
    last_checkup = Column(Date, nullable=True)
    next_checkup = Column(Date, nullable=True)
    breeding_status = Column(_enum(BreedingStatus), nullable=False, default=BreedingStatus.OPEN)
    last_breeding_date = Column(Date, nullable=True)
    expected_delivery_date = Column(Date, nullable=True)


class HealthRecordRow(VersionedModel):
    __tablename__ = "health_records"

    cattle_id = Column(Integer, ForeignKey("cattle.id"), nullable=False, index=True)
    date_of_checkup = Column(Date, nullable=False)
    health_issue = Column(String(255), nullable=False)
    symptoms = Column(Text, nullable=True)
    diagnosis = Column(Text, nullable=True)
    treatment_given = Column(Text, nullable=False)
    treatment_cost = Column(Numeric(10, 2), nullable=False)
    medications = Column(Text, nullable=True)
    next_checkup_date = Column(Date, nullable=True)
    attended_by = Column(Integer, ForeignKey("users.id"), nullable=False)
    notes = Column(Text, nullable=True)
    status = Column(_enum(HealthRecordStatus), nullable=False)


class BreedingRecordRow(VersionedModel):
    __tablename__ = "breeding_records"

    cattle_id = Column(Integer, ForeignKey("cattle.id"), nullable=False, index=True)
    breeding_date = Column(Date, nullable=False)
    breeding_type = Column(_enum(BreedingType), nullable=False)
    sire_details = Column(String(255), nullable=False)
    semen_batch = Column(String(100), nullable=True)
    technician_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    breeding_cost = Column(Numeric(10, 2), nullable=False)
    notes = Column(Text, nullable=True)
    status = Column(_enum(BreedingRecordStatus), nullable=False)
    expected_date = Column(Date, nullable=False)
    pregnancy_status = Column(_enum(PregnancyStatus), nullable=True)
    pregnancy_check_date = Column(Date, nullable=True)
    calving_date = Column(Date, nullable=True)
    calf_tag_number = Column(String(50), nullable=True)


class FeedInventoryRow(VersionedModel):
    __tablename__ = "feed_inventory"

    feed_name = Column(String(100), nullable=False)
    feed_type = Column(_enum(FeedType), nullable=False)
    description = Column(Text, nullable=True)
    supplier = Column(String(100), nullable=True)
    unit_of_measure = Column(_enum(UnitOfMeasure), nullable=False)
    unit_cost = Column(Numeric(10, 2), nullable=False)
    current_quantity = Column(Numeric(10, 2), nullable=False)
    reorder_level = Column(Numeric(10, 2), nullable=False)
    expiry_date = Column(Date, nullable=False)
    storage_location = Column(String(100), nullable=True)
    notes = Column(Text, nullable=True)
    status = Column(_enum(StockStatus), nullable=False)


class FeedTransactionRow(BaseModel):
    """Append-only stock ledger."""

    __tablename__ = "feed_transactions"

    feed_id = Column(Integer, ForeignKey("feed_inventory.id"), nullable=False, index=True)
    transaction_type = Column(_enum(FeedTransactionType), nullable=False)
    quantity = Column(Numeric(10, 2), nullable=False)
    unit_cost = Column(Numeric(10, 2), nullable=False)
    total_cost = Column(Numeric(12, 2), nullable=False)
    notes = Column(Text, nullable=True)


class WorkerRow(VersionedModel):
    __tablename__ = "workers"
    __table_args__ = (
        Index(
            "uq_workers_id_number_live",
            "id_number",
            unique=True,
            postgresql_where=LIVE_ROWS,
            sqlite_where=LIVE_ROWS,
        ),
    )

    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    id_number = Column(String(50), nullable=False)
    date_hired = Column(Date, nullable=False)
    salary = Column(Numeric(10, 2), nullable=True)
    assigned_duties = Column(Text, nullable=True)


class AuditLogRow(Base):
    """Audit trail. Rows are only ever inserted."""

    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    actor_id = Column(Integer, nullable=True, index=True)
    action = Column(_enum(AuditAction), nullable=False)
    record_kind = Column(_enum(RecordKind), nullable=False)
    record_id = Column(Integer, nullable=False)
    old_values = Column(SNAPSHOT, nullable=True)
    new_values = Column(SNAPSHOT, nullable=True)
    ip_address = Column(String(64), nullable=False)
    user_agent = Column(String(512), nullable=False)
    correlation_id = Column(String(64), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (Index("ix_audit_logs_record", "record_kind", "record_id"),)
