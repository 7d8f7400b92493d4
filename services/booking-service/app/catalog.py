from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Mapping

from dateutil import parser

from .errors import ValidationError

CLASSROOMS = tuple(
    [f"ECR {i}" for i in range(1, 19)] + [f"ELT {i}" for i in range(1, 8)]
)

TIME_SLOTS = (
    "08:30-09:30",
    "09:30-10:30",
    "10:30-11:30",
    "11:30-12:30",
    "12:30-13:30",
    "13:30-14:30",
    "14:30-15:30",
    "15:30-16:30",
    "16:30-17:30",
    "17:30-18:30",
)

# slot -> the only classrooms offered in it, whatever the bookings say
SLOT_OVERRIDES = MappingProxyType({
    "09:30-10:30": frozenset({"ECR 1", "ECR 2", "ECR 3"}),
})

MENTOR_TIMES = (
    "09:00 AM", "10:00 AM", "11:00 AM", "12:00 PM",
    "01:00 PM", "02:00 PM", "03:00 PM", "04:00 PM", "05:00 PM",
)

CLASSROOM_PURPOSE_MIN_LENGTH = 10
MENTOR_PURPOSE_MIN_LENGTH = 5


@dataclass(frozen=True)
class ClassroomCatalog:
    classrooms: tuple = CLASSROOMS
    time_slots: tuple = TIME_SLOTS
    overrides: Mapping[str, frozenset] = field(default_factory=lambda: SLOT_OVERRIDES)

    def lookup(self, name: str | None) -> str | None:
        """Catalog spelling of ``name``; 'ecr5' and 'Ecr 5' both give 'ECR 5'."""
        key = (name or "").replace(" ", "").lower()
        for classroom in self.classrooms:
            if classroom.replace(" ", "").lower() == key:
                return classroom
        return None

    def is_overridden(self, time_slot: str) -> bool:
        return time_slot in self.overrides

    def eligible(self, time_slot: str) -> frozenset:
        """Classrooms that may be booked in ``time_slot`` before bookings are considered."""
        if time_slot in self.overrides:
            return frozenset(self.overrides[time_slot])
        if time_slot not in self.time_slots:
            return frozenset()
        return frozenset(self.classrooms)


@dataclass(frozen=True)
class MentorCatalog:
    times: tuple = MENTOR_TIMES


DEFAULT_CLASSROOM_CATALOG = ClassroomCatalog()
DEFAULT_MENTOR_CATALOG = MentorCatalog()


def normalize_date(value: str) -> str:
    """Return ``value`` as a canonical ``YYYY-MM-DD`` string.

    Only ISO-8601 input is accepted (``2025-06-01``, ``20250601``,
    ``2025-06-01T09:00:00``); anything else is a ValidationError so two
    spellings of the same day can never slip past the uniqueness check.
    """
    if not value or not str(value).strip():
        raise ValidationError("date is required")
    try:
        return parser.isoparse(str(value).strip()).date().isoformat()
    except (ValueError, OverflowError):
        raise ValidationError(f"Invalid date: {value!r}, expected YYYY-MM-DD")


_DEFAULT_DAY = datetime(2000, 1, 1)


def _clock(value: str):
    return parser.parse(value.strip(), default=_DEFAULT_DAY).time()


def canonical_time_slot(value: str | None) -> str | None:
    """'8:30 - 9:30' -> '08:30-09:30', or None when it can't be read."""
    if not value or "-" not in value:
        return None
    start, _, end = value.partition("-")
    try:
        return f"{_clock(start):%H:%M}-{_clock(end):%H:%M}"
    except (ValueError, OverflowError):
        return None


def canonical_clock_time(value: str | None) -> str | None:
    """'9:00 am' -> '09:00 AM', or None when it can't be read."""
    if not value or not value.strip():
        return None
    try:
        return f"{_clock(value):%I:%M %p}"
    except (ValueError, OverflowError):
        return None


def normalize_time_slot(value: str) -> str:
    slot = canonical_time_slot(value)
    if slot is None:
        raise ValidationError(f"Invalid time slot: {value!r}")
    return slot


def normalize_clock_time(value: str) -> str:
    clock = canonical_clock_time(value)
    if clock is None:
        raise ValidationError(f"Invalid time: {value!r}")
    return clock


def validate_purpose(purpose: str | None, min_length: int) -> str:
    text = (purpose or "").strip()
    if len(text) < min_length:
        raise ValidationError(f"purpose must be at least {min_length} characters")
    return text
