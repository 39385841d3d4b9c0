"""Domain tests: field validators report every violation and parse clean values."""

from datetime import date
from decimal import Decimal

import pytest

from herdbook.domain.models.records import (
    BreedingType,
    CattleStatus,
    FeedType,
    Gender,
    HealthRecordStatus,
    WorkerStatus,
)
from herdbook.domain.validators import (
    parse_date,
    parse_decimal,
    parse_id,
    validate_breeding_record_fields,
    validate_cattle_fields,
    validate_feed_fields,
    validate_health_record_fields,
    validate_worker_fields,
)

TODAY = date(2024, 6, 1)


def _cattle(**overrides):
    fields = {
        "tag_number": " KE-001 ",
        "breed": "Friesian",
        "date_of_birth": "2021-03-14",
        "gender": "female",
        "current_weight": "412.5",
    }
    fields.update(overrides)
    return fields


def _worker(**overrides):
    fields = {
        "full_name": "Jane Wanjiru",
        "email": "Jane@Farm.co.ke",
        "phone_number": "+254712345678",
        "id_number": "12345678",
        "role": "milker",
        "date_hired": "2023-01-09",
        "salary": "25000",
        "password": "milking-shed-7",
        "confirm_password": "milking-shed-7",
    }
    fields.update(overrides)
    return fields


class TestParsers:
    def test_parse_date_is_strict(self):
        assert parse_date("2024-02-29") == date(2024, 2, 29)
        assert parse_date("2023-02-29") is None
        assert parse_date("2024-1-5") is None
        assert parse_date("01/05/2024") is None
        assert parse_date("") is None

    def test_parse_decimal(self):
        assert parse_decimal("12.50") == Decimal("12.50")
        assert parse_decimal(3) == Decimal(3)
        assert parse_decimal("abc") is None
        assert parse_decimal("NaN") is None
        assert parse_decimal(True) is None

    def test_parse_id(self):
        assert parse_id("42") == 42
        assert parse_id(7) == 7
        assert parse_id("0") is None
        assert parse_id("-3") is None
        assert parse_id("4.2") is None


class TestCattle:
    def test_valid_create_starts_active(self):
        values, errors = validate_cattle_fields(_cattle(), today=TODAY, creating=True)
        assert errors == []
        assert values["tag_number"] == "KE-001"
        assert values["gender"] is Gender.FEMALE
        assert values["status"] is CattleStatus.ACTIVE
        assert values["current_weight"] == Decimal("412.5")

    def test_every_violation_reported(self):
        fields = {
            "tag_number": "",
            "breed": "  ",
            "date_of_birth": "2024-13-01",
            "gender": "steer",
            "current_weight": "-4",
            "assigned_worker": "abc",
        }
        _, errors = validate_cattle_fields(fields, today=TODAY, creating=True)
        assert errors == [
            "Tag number is required",
            "Breed is required",
            "Invalid date of birth",
            "Invalid gender",
            "Current weight must be a non-negative number",
            "Invalid assigned worker",
        ]

    def test_future_birth_date_rejected(self):
        _, errors = validate_cattle_fields(_cattle(date_of_birth="2024-06-02"), today=TODAY, creating=True)
        assert errors == ["Date of birth cannot be in the future"]

    def test_birth_date_today_accepted(self):
        _, errors = validate_cattle_fields(_cattle(date_of_birth="2024-06-01"), today=TODAY, creating=True)
        assert errors == []

    def test_update_requires_valid_status(self):
        _, errors = validate_cattle_fields(_cattle(status="lost"), today=TODAY, creating=False)
        assert errors == ["Invalid cattle status"]
        values, errors = validate_cattle_fields(_cattle(status="sold"), today=TODAY, creating=False)
        assert errors == []
        assert values["status"] is CattleStatus.SOLD


class TestHealthRecord:
    def test_valid_create(self):
        values, errors = validate_health_record_fields(
            {
                "cattle_id": "1",
                "date_of_checkup": "2024-05-30",
                "health_issue": "Mastitis",
                "treatment_given": "Antibiotics",
                "treatment_cost": "1500",
                "attended_by": "3",
                "status": "ongoing",
            },
            creating=True,
        )
        assert errors == []
        assert values["cattle_id"] == 1
        assert values["status"] is HealthRecordStatus.ONGOING
        assert values["next_checkup_date"] is None

    def test_every_violation_reported(self):
        _, errors = validate_health_record_fields({"next_checkup_date": "soon", "status": "cured"}, creating=True)
        assert errors == [
            "Cattle selection is required",
            "Valid checkup date is required",
            "Health issue is required",
            "Treatment information is required",
            "Valid treatment cost is required",
            "Invalid next checkup date",
            "Attending veterinarian is required",
            "Invalid health record status",
        ]

    def test_update_ignores_cattle(self):
        values, _ = validate_health_record_fields({"cattle_id": "9"}, creating=False)
        assert "cattle_id" not in values


class TestBreedingRecord:
    def _fields(self, **overrides):
        fields = {
            "cattle_id": "1",
            "breeding_date": "2024-01-10",
            "breeding_type": "artificial",
            "sire_details": "Holstein bull HX-22",
            "technician_id": "3",
            "breeding_cost": "2500",
            "status": "pending",
        }
        fields.update(overrides)
        return fields

    def test_valid_create(self):
        values, errors = validate_breeding_record_fields(self._fields(), creating=True)
        assert errors == []
        assert values["breeding_type"] is BreedingType.ARTIFICIAL
        assert values["technician_id"] == 3

    def test_technician_required_unless_natural(self):
        _, errors = validate_breeding_record_fields(self._fields(technician_id=""), creating=True)
        assert errors == ["Technician is required for artificial insemination or embryo transfer"]
        _, errors = validate_breeding_record_fields(
            self._fields(technician_id="", breeding_type="natural"), creating=True
        )
        assert errors == []

    def test_every_violation_reported(self):
        _, errors = validate_breeding_record_fields(
            {"breeding_type": "cloning", "pregnancy_status": "maybe", "calving_date": "x"},
            creating=True,
        )
        assert errors == [
            "Cattle selection is required",
            "Valid breeding date is required",
            "Invalid breeding type",
            "Sire details are required",
            "Valid breeding cost is required",
            "Invalid breeding status",
            "Invalid pregnancy status",
            "Invalid calving date",
        ]


class TestFeed:
    def test_valid(self):
        values, errors = validate_feed_fields(
            {
                "feed_name": "Dairy meal",
                "feed_type": "concentrate",
                "unit_of_measure": "bag",
                "unit_cost": "2400",
                "current_quantity": "12",
                "reorder_level": "5",
                "expiry_date": "2024-12-31",
            }
        )
        assert errors == []
        assert values["feed_type"] is FeedType.CONCENTRATE
        assert "status" not in values

    def test_every_violation_reported(self):
        _, errors = validate_feed_fields({"feed_type": "grass", "unit_cost": "-1"})
        assert errors == [
            "Feed name is required",
            "Invalid feed type",
            "Unit of measure is required",
            "Valid unit cost is required",
            "Valid quantity is required",
            "Valid reorder level is required",
            "Valid expiry date is required",
        ]


class TestWorker:
    def test_valid_create(self):
        values, errors = validate_worker_fields(_worker(), creating=True)
        assert errors == []
        assert values["email"] == "jane@farm.co.ke"
        assert values["status"] is WorkerStatus.ACTIVE
        assert values["password"] == "milking-shed-7"

    def test_every_violation_reported(self):
        _, errors = validate_worker_fields(
            {
                "email": "not-an-email",
                "phone_number": "0712345678",
                "role": "admin",
                "salary": "lots",
                "password": "short",
                "confirm_password": "shorter",
            },
            creating=True,
        )
        assert errors == [
            "Full name is required",
            "Valid email is required",
            "Valid phone number is required (format: +254XXXXXXXXX)",
            "ID number is required",
            "Invalid role",
            "Valid hire date is required",
            "Valid salary is required",
            "Passwords do not match",
            "Password must be at least 8 characters long",
        ]

    @pytest.mark.parametrize("phone", ["+254112345678", "+254712345678"])
    def test_kenyan_mobile_prefixes_accepted(self, phone):
        _, errors = validate_worker_fields(_worker(phone_number=phone), creating=True)
        assert errors == []

    def test_update_password_is_optional(self):
        fields = _worker(status="inactive")
        del fields["password"], fields["confirm_password"]
        values, errors = validate_worker_fields(fields, creating=False)
        assert errors == []
        assert values["password"] is None
        assert values["status"] is WorkerStatus.INACTIVE

    def test_update_short_new_password_rejected(self):
        _, errors = validate_worker_fields(_worker(status="active", new_password="abc"), creating=False)
        assert errors == ["Password must be at least 8 characters long"]
