"""Derived fields and denormalised status mappings. Pure functions, no infrastructure or DB access."""

from datetime import date, timedelta
from decimal import Decimal
from typing import Dict, Optional

from herdbook.domain.models.records import (
    BreedingRecordStatus,
    BreedingStatus,
    FeedTransaction,
    FeedTransactionType,
    HealthRecordStatus,
    HealthStatus,
    PregnancyStatus,
    StockStatus,
)

# Bovine gestation length used for the expected delivery date
GESTATION_DAYS = 285

HEALTH_STATUS_BY_RECORD_STATUS: Dict[HealthRecordStatus, HealthStatus] = {
    HealthRecordStatus.ONGOING: HealthStatus.SICK,
    HealthRecordStatus.FOLLOW_UP: HealthStatus.UNDER_TREATMENT,
    HealthRecordStatus.COMPLETED: HealthStatus.HEALTHY,
}

BREEDING_STATUS_BY_RECORD_STATUS: Dict[BreedingRecordStatus, BreedingStatus] = {
    BreedingRecordStatus.PENDING: BreedingStatus.BRED,
    BreedingRecordStatus.SUCCESSFUL: BreedingStatus.BRED,
    BreedingRecordStatus.PREGNANT: BreedingStatus.PREGNANT,
    BreedingRecordStatus.FAILED: BreedingStatus.OPEN,
    BreedingRecordStatus.CALVED: BreedingStatus.OPEN,
}

INITIAL_STOCK_NOTE = "Initial stock entry"
ADJUSTMENT_NOTE = "Quantity adjusted during edit"


def health_status_for(record_status: HealthRecordStatus) -> HealthStatus:
    """Cattle health status implied by a health record's status."""
    return HEALTH_STATUS_BY_RECORD_STATUS[record_status]


def breeding_status_for(
    record_status: BreedingRecordStatus,
    pregnancy_status: Optional[PregnancyStatus] = None,
) -> BreedingStatus:
    """Cattle breeding status implied by a breeding record. A confirmed pregnancy check wins."""
    if pregnancy_status is PregnancyStatus.CONFIRMED:
        return BreedingStatus.PREGNANT
    return BREEDING_STATUS_BY_RECORD_STATUS[record_status]


def expected_delivery_date(breeding_date: date) -> date:
    """Breeding date plus the gestation period. Plain day addition."""
    return breeding_date + timedelta(days=GESTATION_DAYS)


def stock_status(
    quantity: Decimal,
    reorder_level: Decimal,
    expiry_date: date,
    today: date,
) -> StockStatus:
    """
    Stock status with fixed precedence: expired > out_of_stock > low_stock > in_stock.
    Stock expires on its expiry date.
    """
    if expiry_date <= today:
        return StockStatus.EXPIRED
    if quantity <= 0:
        return StockStatus.OUT_OF_STOCK
    if quantity <= reorder_level:
        return StockStatus.LOW_STOCK
    return StockStatus.IN_STOCK


def initial_stock_entry(feed_id: int, quantity: Decimal, unit_cost: Decimal) -> FeedTransaction:
    return FeedTransaction(
        feed_id=feed_id,
        transaction_type=FeedTransactionType.INITIAL_STOCK,
        quantity=quantity,
        unit_cost=unit_cost,
        total_cost=unit_cost * quantity,
        notes=INITIAL_STOCK_NOTE,
    )


def stock_adjustment_entry(
    feed_id: int,
    previous_quantity: Decimal,
    new_quantity: Decimal,
    unit_cost: Decimal,
) -> Optional[FeedTransaction]:
    """Ledger line for a quantity change made through an edit, or None if quantity is unchanged."""
    difference = new_quantity - previous_quantity
    if difference == 0:
        return None
    transaction_type = (
        FeedTransactionType.ADJUSTMENT_ADD if difference > 0 else FeedTransactionType.ADJUSTMENT_SUBTRACT
    )
    quantity = abs(difference)
    return FeedTransaction(
        feed_id=feed_id,
        transaction_type=transaction_type,
        quantity=quantity,
        unit_cost=unit_cost,
        total_cost=unit_cost * quantity,
        notes=ADJUSTMENT_NOTE,
    )
