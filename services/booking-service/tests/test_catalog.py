import pytest

from app.catalog import (
    CLASSROOMS,
    DEFAULT_CLASSROOM_CATALOG,
    SLOT_OVERRIDES,
    TIME_SLOTS,
    canonical_clock_time,
    canonical_time_slot,
    normalize_clock_time,
    normalize_date,
    normalize_time_slot,
    validate_purpose,
)
from app.errors import ValidationError


def test_catalog_has_25_classrooms_and_10_slots():
    assert len(CLASSROOMS) == 25
    assert CLASSROOMS[0] == "ECR 1"
    assert CLASSROOMS[17] == "ECR 18"
    assert CLASSROOMS[-1] == "ELT 7"
    assert len(TIME_SLOTS) == 10


def test_override_slot_exposes_only_three_classrooms():
    assert DEFAULT_CLASSROOM_CATALOG.eligible("09:30-10:30") == {"ECR 1", "ECR 2", "ECR 3"}
    assert DEFAULT_CLASSROOM_CATALOG.eligible("10:30-11:30") == set(CLASSROOMS)
    assert DEFAULT_CLASSROOM_CATALOG.eligible("07:00-08:00") == set()


def test_override_table_is_read_only():
    with pytest.raises(TypeError):
        SLOT_OVERRIDES["10:30-11:30"] = frozenset({"ECR 4"})


@pytest.mark.parametrize(
    "raw",
    ["2025-06-01", " 2025-06-01 ", "20250601", "2025-06-01T09:30:00"],
)
def test_normalize_date_to_canonical_form(raw):
    assert normalize_date(raw) == "2025-06-01"


@pytest.mark.parametrize("raw", ["", "   ", "06/01/2025", "2025-13-01", "tomorrow"])
def test_normalize_date_rejects_non_iso(raw):
    with pytest.raises(ValidationError):
        normalize_date(raw)


def test_time_slot_normalization():
    assert normalize_time_slot("8:30-9:30") == "08:30-09:30"
    assert normalize_time_slot(" 08:30 - 09:30 ") == "08:30-09:30"
    assert canonical_time_slot("nonsense") is None
    with pytest.raises(ValidationError):
        normalize_time_slot("half past eight")


def test_clock_time_normalization():
    assert normalize_clock_time("9:00 am") == "09:00 AM"
    assert normalize_clock_time("13:00") == "01:00 PM"
    assert normalize_clock_time("12:00 PM") == "12:00 PM"
    assert canonical_clock_time("") is None
    with pytest.raises(ValidationError):
        normalize_clock_time("noonish")


def test_classroom_lookup_is_forgiving_about_spacing_and_case():
    assert DEFAULT_CLASSROOM_CATALOG.lookup("ecr5") == "ECR 5"
    assert DEFAULT_CLASSROOM_CATALOG.lookup("Elt 7") == "ELT 7"
    assert DEFAULT_CLASSROOM_CATALOG.lookup("ECR 19") is None
    assert DEFAULT_CLASSROOM_CATALOG.lookup(None) is None


def test_validate_purpose_strips_and_checks_length():
    assert validate_purpose("  Club meeting rehearsal ", 10) == "Club meeting rehearsal"
    with pytest.raises(ValidationError):
        validate_purpose("short", 10)
    with pytest.raises(ValidationError):
        validate_purpose(None, 5)
