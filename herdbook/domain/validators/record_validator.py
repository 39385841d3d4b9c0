"""
Field validators for farm records. Pure functions, no infrastructure or DB access.

Each ``validate_*_fields`` function returns ``(values, errors)``: the parsed values
ready for persistence and the full list of violated rules. Rules that need the
database (uniqueness, referenced cattle) are checked by the record handlers.
"""

import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple, Type, TypeVar

from herdbook.domain.models.records import (
    BreedingRecordStatus,
    BreedingType,
    CattleStatus,
    FeedType,
    Gender,
    HealthRecordStatus,
    PregnancyStatus,
    UnitOfMeasure,
    WorkerStatus,
)

DATE_FORMAT = "%Y-%m-%d"
KENYAN_PHONE_PATTERN = re.compile(r"^\+254[17][0-9]{8}$")
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MIN_PASSWORD_LENGTH = 8
# Admin accounts are not created through the worker register
ASSIGNABLE_WORKER_ROLES = ("manager", "worker", "vet", "milker")
# Accounts that may be referenced from cattle, health and breeding records
VETERINARIAN_ROLES = ("vet",)
CATTLE_CARER_ROLES = ("worker", "vet", "milker")

E = TypeVar("E", bound=Enum)

FieldValues = Dict[str, Any]
ValidationOutcome = Tuple[FieldValues, List[str]]


def clean_text(value: Any) -> Optional[str]:
    """Strip surrounding whitespace; empty input becomes None."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_date(value: Any) -> Optional[date]:
    """Accept a date or a strict YYYY-MM-DD string. Returns None when missing or malformed."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = clean_text(value)
    if text is None:
        return None
    try:
        parsed = datetime.strptime(text, DATE_FORMAT).date()
    except ValueError:
        return None
    # Reject lenient forms such as 2024-1-5
    if parsed.strftime(DATE_FORMAT) != text:
        return None
    return parsed


def parse_decimal(value: Any) -> Optional[Decimal]:
    """Accept int, float, Decimal or numeric string. Returns None when missing, non-numeric or not finite."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        number = value
    else:
        text = clean_text(value)
        if text is None:
            return None
        try:
            number = Decimal(text)
        except InvalidOperation:
            return None
    return number if number.is_finite() else None


def parse_id(value: Any) -> Optional[int]:
    """Positive integer identifier, or None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    text = clean_text(value)
    if text is None or not text.isdigit():
        return None
    number = int(text)
    return number if number > 0 else None


def parse_choice(value: Any, choices: Type[E]) -> Optional[E]:
    """Member of a fixed value set, or None."""
    if isinstance(value, choices):
        return value
    text = clean_text(value)
    if text is None:
        return None
    try:
        return choices(text)
    except ValueError:
        return None


def _is_blank(fields: Mapping[str, Any], name: str) -> bool:
    return clean_text(fields.get(name)) is None


def _non_negative(fields: Mapping[str, Any], name: str) -> Optional[Decimal]:
    number = parse_decimal(fields.get(name))
    if number is None or number < 0:
        return None
    return number


def _optional_date(
    fields: Mapping[str, Any], name: str, message: str, errors: List[str]
) -> Optional[date]:
    if _is_blank(fields, name):
        return None
    parsed = parse_date(fields.get(name))
    if parsed is None:
        errors.append(message)
    return parsed


def _optional_choice(
    fields: Mapping[str, Any], name: str, choices: Type[E], message: str, errors: List[str]
) -> Optional[E]:
    if _is_blank(fields, name):
        return None
    parsed = parse_choice(fields.get(name), choices)
    if parsed is None:
        errors.append(message)
    return parsed


def _optional_id(fields: Mapping[str, Any], name: str, message: str, errors: List[str]) -> Optional[int]:
    raw = fields.get(name)
    if _is_blank(fields, name):
        return None
    parsed = parse_id(raw)
    if parsed is None:
        errors.append(message)
    return parsed


def _required_choice(
    fields: Mapping[str, Any],
    name: str,
    choices: Type[E],
    missing_message: str,
    invalid_message: str,
    errors: List[str],
) -> Optional[E]:
    if _is_blank(fields, name):
        errors.append(missing_message)
        return None
    parsed = parse_choice(fields.get(name), choices)
    if parsed is None:
        errors.append(invalid_message)
    return parsed


def validate_cattle_fields(fields: Mapping[str, Any], *, today: date, creating: bool) -> ValidationOutcome:
    """Cattle register rules. New animals always start active."""
    errors: List[str] = []

    tag_number = clean_text(fields.get("tag_number"))
    if tag_number is None:
        errors.append("Tag number is required")

    breed = clean_text(fields.get("breed"))
    if breed is None:
        errors.append("Breed is required")

    date_of_birth = parse_date(fields.get("date_of_birth"))
    if date_of_birth is None:
        errors.append("Invalid date of birth")
    elif date_of_birth > today:
        errors.append("Date of birth cannot be in the future")

    gender = parse_choice(fields.get("gender"), Gender)
    if gender is None:
        errors.append("Invalid gender")

    current_weight = None
    if not _is_blank(fields, "current_weight"):
        current_weight = _non_negative(fields, "current_weight")
        if current_weight is None:
            errors.append("Current weight must be a non-negative number")

    assigned_worker = _optional_id(fields, "assigned_worker", "Invalid assigned worker", errors)

    if creating:
        status: Optional[CattleStatus] = CattleStatus.ACTIVE
    else:
        status = parse_choice(fields.get("status"), CattleStatus)
        if status is None:
            errors.append("Invalid cattle status")

    values = {
        "tag_number": tag_number,
        "cattle_name": clean_text(fields.get("cattle_name")),
        "breed": breed,
        "date_of_birth": date_of_birth,
        "gender": gender,
        "current_weight": current_weight,
        "assigned_worker": assigned_worker,
        "status": status,
        "notes": clean_text(fields.get("notes")),
    }
    return values, errors


def validate_health_record_fields(fields: Mapping[str, Any], *, creating: bool) -> ValidationOutcome:
    """Health record rules. The animal is chosen on create and fixed afterwards."""
    errors: List[str] = []
    values: FieldValues = {}

    if creating:
        cattle_id = parse_id(fields.get("cattle_id"))
        if cattle_id is None:
            errors.append("Cattle selection is required")
        values["cattle_id"] = cattle_id

    date_of_checkup = parse_date(fields.get("date_of_checkup"))
    if date_of_checkup is None:
        errors.append("Valid checkup date is required")

    health_issue = clean_text(fields.get("health_issue"))
    if health_issue is None:
        errors.append("Health issue is required")

    treatment_given = clean_text(fields.get("treatment_given"))
    if treatment_given is None:
        errors.append("Treatment information is required")

    treatment_cost = _non_negative(fields, "treatment_cost")
    if treatment_cost is None:
        errors.append("Valid treatment cost is required")

    next_checkup_date = _optional_date(fields, "next_checkup_date", "Invalid next checkup date", errors)

    attended_by = parse_id(fields.get("attended_by"))
    if attended_by is None:
        errors.append("Attending veterinarian is required")

    status = parse_choice(fields.get("status"), HealthRecordStatus)
    if status is None:
        errors.append("Invalid health record status")

    values.update(
        {
            "date_of_checkup": date_of_checkup,
            "health_issue": health_issue,
            "symptoms": clean_text(fields.get("symptoms")),
            "diagnosis": clean_text(fields.get("diagnosis")),
            "treatment_given": treatment_given,
            "treatment_cost": treatment_cost,
            "medications": clean_text(fields.get("medications")),
            "next_checkup_date": next_checkup_date,
            "attended_by": attended_by,
            "notes": clean_text(fields.get("notes")),
            "status": status,
        }
    )
    return values, errors


def validate_breeding_record_fields(fields: Mapping[str, Any], *, creating: bool) -> ValidationOutcome:
    """Breeding record rules, including the technician cross-field rule."""
    errors: List[str] = []
    values: FieldValues = {}

    if creating:
        cattle_id = parse_id(fields.get("cattle_id"))
        if cattle_id is None:
            errors.append("Cattle selection is required")
        values["cattle_id"] = cattle_id

    breeding_date = parse_date(fields.get("breeding_date"))
    if breeding_date is None:
        errors.append("Valid breeding date is required")

    breeding_type = _required_choice(
        fields, "breeding_type", BreedingType, "Breeding type is required", "Invalid breeding type", errors
    )

    sire_details = clean_text(fields.get("sire_details"))
    if sire_details is None:
        errors.append("Sire details are required")

    technician_id = _optional_id(fields, "technician_id", "Invalid technician", errors)
    if (
        breeding_type is not None
        and breeding_type is not BreedingType.NATURAL
        and technician_id is None
        and _is_blank(fields, "technician_id")
    ):
        errors.append("Technician is required for artificial insemination or embryo transfer")

    breeding_cost = _non_negative(fields, "breeding_cost")
    if breeding_cost is None:
        errors.append("Valid breeding cost is required")

    status = parse_choice(fields.get("status"), BreedingRecordStatus)
    if status is None:
        errors.append("Invalid breeding status")

    pregnancy_status = _optional_choice(
        fields, "pregnancy_status", PregnancyStatus, "Invalid pregnancy status", errors
    )
    pregnancy_check_date = _optional_date(
        fields, "pregnancy_check_date", "Invalid pregnancy check date", errors
    )
    calving_date = _optional_date(fields, "calving_date", "Invalid calving date", errors)

    values.update(
        {
            "breeding_date": breeding_date,
            "breeding_type": breeding_type,
            "sire_details": sire_details,
            "semen_batch": clean_text(fields.get("semen_batch")),
            "technician_id": technician_id,
            "breeding_cost": breeding_cost,
            "notes": clean_text(fields.get("notes")),
            "status": status,
            "pregnancy_status": pregnancy_status,
            "pregnancy_check_date": pregnancy_check_date,
            "calving_date": calving_date,
            "calf_tag_number": clean_text(fields.get("calf_tag_number")),
        }
    )
    return values, errors


def validate_feed_fields(fields: Mapping[str, Any]) -> ValidationOutcome:
    """Feed inventory rules. Stock status is derived, never taken from input."""
    errors: List[str] = []

    feed_name = clean_text(fields.get("feed_name"))
    if feed_name is None:
        errors.append("Feed name is required")

    feed_type = _required_choice(
        fields, "feed_type", FeedType, "Feed type is required", "Invalid feed type", errors
    )
    unit_of_measure = _required_choice(
        fields,
        "unit_of_measure",
        UnitOfMeasure,
        "Unit of measure is required",
        "Invalid unit of measure",
        errors,
    )

    unit_cost = _non_negative(fields, "unit_cost")
    if unit_cost is None:
        errors.append("Valid unit cost is required")

    current_quantity = _non_negative(fields, "current_quantity")
    if current_quantity is None:
        errors.append("Valid quantity is required")

    reorder_level = _non_negative(fields, "reorder_level")
    if reorder_level is None:
        errors.append("Valid reorder level is required")

    expiry_date = parse_date(fields.get("expiry_date"))
    if expiry_date is None:
        errors.append("Valid expiry date is required")

    values = {
        "feed_name": feed_name,
        "feed_type": feed_type,
        "description": clean_text(fields.get("description")),
        "supplier": clean_text(fields.get("supplier")),
        "unit_of_measure": unit_of_measure,
        "unit_cost": unit_cost,
        "current_quantity": current_quantity,
        "reorder_level": reorder_level,
        "expiry_date": expiry_date,
        "storage_location": clean_text(fields.get("storage_location")),
        "notes": clean_text(fields.get("notes")),
    }
    return values, errors


def validate_worker_fields(fields: Mapping[str, Any], *, creating: bool) -> ValidationOutcome:
    """
    Worker register rules. Create takes password + confirm_password;
    update takes status and an optional new_password.
    """
    errors: List[str] = []

    full_name = clean_text(fields.get("full_name"))
    if full_name is None:
        errors.append("Full name is required")

    email = clean_text(fields.get("email"))
    if email is None or not EMAIL_PATTERN.match(email):
        errors.append("Valid email is required")
    else:
        email = email.lower()

    phone_number = clean_text(fields.get("phone_number"))
    if phone_number is None or not KENYAN_PHONE_PATTERN.match(phone_number):
        errors.append("Valid phone number is required (format: +254XXXXXXXXX)")

    id_number = clean_text(fields.get("id_number"))
    if id_number is None:
        errors.append("ID number is required")

    role = clean_text(fields.get("role"))
    if role is None:
        errors.append("Role is required")
    elif role not in ASSIGNABLE_WORKER_ROLES:
        errors.append("Invalid role")

    date_hired = parse_date(fields.get("date_hired"))
    if date_hired is None:
        errors.append("Valid hire date is required")

    salary = None
    if not _is_blank(fields, "salary"):
        salary = _non_negative(fields, "salary")
        if salary is None:
            errors.append("Valid salary is required")

    values: FieldValues = {
        "full_name": full_name,
        "email": email,
        "phone_number": phone_number,
        "id_number": id_number,
        "role": role,
        "date_hired": date_hired,
        "salary": salary,
        "assigned_duties": clean_text(fields.get("assigned_duties")),
    }

    if creating:
        password = fields.get("password") or ""
        if password != (fields.get("confirm_password") or ""):
            errors.append("Passwords do not match")
        if len(password) < MIN_PASSWORD_LENGTH:
            errors.append("Password must be at least 8 characters long")
        values["status"] = WorkerStatus.ACTIVE
        values["password"] = password
    else:
        status = parse_choice(fields.get("status"), WorkerStatus)
        if status is None:
            errors.append("Invalid worker status")
        values["status"] = status
        new_password = fields.get("new_password") or ""
        if new_password and len(new_password) < MIN_PASSWORD_LENGTH:
            errors.append("Password must be at least 8 characters long")
        values["password"] = new_password or None

    return values, errors
