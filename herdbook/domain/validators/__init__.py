"""Domain validators. Pure validation functions."""

from herdbook.domain.validators.record_validator import (
    clean_text,
    parse_choice,
    parse_date,
    parse_decimal,
    parse_id,
    validate_breeding_record_fields,
    validate_cattle_fields,
    validate_feed_fields,
    validate_health_record_fields,
    validate_worker_fields,
)

__all__ = [
    "clean_text",
    "parse_choice",
    "parse_date",
    "parse_decimal",
    "parse_id",
    "validate_breeding_record_fields",
    "validate_cattle_fields",
    "validate_feed_fields",
    "validate_health_record_fields",
    "validate_worker_fields",
]
