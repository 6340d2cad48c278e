"""
Availability engine.

Turns a restaurant's weekly operating hours, table inventory and the
reservations already on the books for a date into an ordered list of
bookable slots, each annotated with remaining capacity and a status.

Everything here is pure: no storage access, no clock reads. Callers
pre-filter reservations by restaurant and date and resolve "today"
themselves.
"""
from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, List, Sequence, Union

DAYS_OF_WEEK = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)

# Slots with less than this share of total capacity left are "limited"
DEFAULT_LIMITED_THRESHOLD = 0.30

CLOCK_RE = re.compile(r"(\d{2}):(\d{2})")


class InvalidConfigurationError(ValueError):
    """Raised when a restaurant's availability configuration is unusable."""

    pass


class SlotStatus(str, Enum):
    AVAILABLE = "available"
    LIMITED = "limited"
    FULL = "full"


@dataclass(frozen=True)
class OperatingHours:
    """Opening window for one weekday."""

    open: str
    close: str
    closed: bool = False


@dataclass(frozen=True)
class RestaurantSchedule:
    """The subset of a restaurant record the engine needs."""

    operating_hours: Dict[str, OperatingHours]
    table_count: int
    table_capacity: int
    avg_dining_duration: int
    booking_interval: int
    max_days_advance: int = 30
    blocked_dates: FrozenSet[date] = field(default_factory=frozenset)

    @property
    def total_capacity(self) -> int:
        return self.table_count * self.table_capacity

    @classmethod
    def from_record(cls, record: Any) -> "RestaurantSchedule":
        """
        Build a schedule from a restaurant ORM row, schema or plain dict.

        Validates the configuration; raises InvalidConfigurationError
        on anything the engine cannot work with.
        """
        hours = validate_operating_hours(_read(record, "operating_hours"))
        tables = _read(record, "tables")
        schedule = cls(
            operating_hours=hours,
            table_count=_as_int(_read(tables, "count"), "tables.count"),
            table_capacity=_as_int(_read(tables, "capacity"), "tables.capacity"),
            avg_dining_duration=_as_int(
                _read(record, "avg_dining_duration"), "avgDiningDuration"
            ),
            booking_interval=_as_int(_read(record, "booking_interval"), "bookingInterval"),
            max_days_advance=_as_int(
                _read(record, "max_days_advance", 30), "maxDaysAdvance"
            ),
            blocked_dates=frozenset(
                _as_date(d) for d in (_read(record, "blocked_dates", None) or [])
            ),
        )
        schedule.validate()
        return schedule

    def validate(self) -> None:
        if self.table_count < 0:
            raise InvalidConfigurationError("tables.count must be non-negative")
        if self.table_capacity <= 0:
            raise InvalidConfigurationError("tables.capacity must be positive")
        if self.avg_dining_duration <= 0:
            raise InvalidConfigurationError("avgDiningDuration must be positive")
        if self.booking_interval <= 0:
            raise InvalidConfigurationError("bookingInterval must be positive")
        if self.max_days_advance < 0:
            raise InvalidConfigurationError("maxDaysAdvance must be non-negative")

    def hours_for(self, target_date: date) -> OperatingHours:
        day = weekday_name(target_date)
        try:
            return self.operating_hours[day]
        except KeyError:
            raise InvalidConfigurationError(
                f"No operating hours configured for {day}"
            ) from None

    def is_closed_on(self, target_date: date, honor_blocked_dates: bool = True) -> bool:
        if honor_blocked_dates and target_date in self.blocked_dates:
            return True
        return self.hours_for(target_date).closed


@dataclass(frozen=True)
class BookedParty:
    """An existing reservation, reduced to what occupancy needs."""

    time: str
    party_size: int
    status: str = "pending"

    @classmethod
    def from_record(cls, record: Any) -> "BookedParty":
        status = _read(record, "status", "pending")
        return cls(
            time=_read(record, "time"),
            party_size=int(_read(record, "party_size")),
            status=getattr(status, "value", status),
        )


@dataclass(frozen=True)
class AvailabilityPolicy:
    """Tunable knobs of slot classification."""

    limited_threshold: float = DEFAULT_LIMITED_THRESHOLD
    count_cancelled: bool = True
    honor_blocked_dates: bool = True


@dataclass(frozen=True)
class Slot:
    """A single offerable start time."""

    time: str
    available_capacity: int
    total_capacity: int
    status: SlotStatus


@dataclass(frozen=True)
class BookableDate:
    date: date
    weekday: str
    is_closed: bool


def weekday_name(value: date) -> str:
    """Canonical English weekday name ("Monday") for a date."""
    # date.weekday() is Monday=0; DAYS_OF_WEEK starts on Sunday
    return DAYS_OF_WEEK[(value.weekday() + 1) % 7]


def parse_clock(value: str) -> int:
    """Convert "HH:MM" into minutes since midnight."""
    match = CLOCK_RE.fullmatch(value) if isinstance(value, str) else None
    if match is None:
        raise InvalidConfigurationError(f"Invalid time {value!r}, expected HH:MM")
    hours, minutes = int(match.group(1)), int(match.group(2))
    if not (0 <= hours < 24 and 0 <= minutes < 60):
        raise InvalidConfigurationError(f"Invalid time {value!r}, expected HH:MM")
    return hours * 60 + minutes


def format_clock(minutes: int) -> str:
    """Convert minutes since midnight into "HH:MM"."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def validate_operating_hours(hours: Any) -> Dict[str, OperatingHours]:
    """
    Normalize and validate a weekly schedule.

    Every one of the seven weekdays must be present. Open/close times are
    only checked for days that are not closed.
    """
    if not isinstance(hours, Mapping):
        raise InvalidConfigurationError("operatingHours must be a mapping of weekday to hours")

    missing = [day for day in DAYS_OF_WEEK if day not in hours]
    if missing:
        raise InvalidConfigurationError(
            f"operatingHours is missing {', '.join(missing)}"
        )

    normalized: Dict[str, OperatingHours] = {}
    for day in DAYS_OF_WEEK:
        entry = hours[day]
        if isinstance(entry, OperatingHours):
            day_hours = entry
        else:
            day_hours = OperatingHours(
                open=_read(entry, "open", "00:00"),
                close=_read(entry, "close", "00:00"),
                closed=bool(_read(entry, "closed", False)),
            )
        if not day_hours.closed:
            parse_clock(day_hours.open)
            parse_clock(day_hours.close)
        normalized[day] = day_hours
    return normalized


def occupancy_at(
    minute: int,
    reservations: Iterable[BookedParty],
    dining_duration: int,
    count_cancelled: bool = True,
) -> int:
    """
    Guests seated at a given minute.

    A reservation holds capacity over [time, time + dining_duration).
    """
    total = 0
    for party in reservations:
        if not count_cancelled and party.status == "cancelled":
            continue
        start = parse_clock(party.time)
        if start <= minute < start + dining_duration:
            total += party.party_size
    return total


def classify(
    available_capacity: int,
    total_capacity: int,
    requested_party_size: int,
    limited_threshold: float = DEFAULT_LIMITED_THRESHOLD,
) -> SlotStatus:
    if available_capacity < requested_party_size:
        return SlotStatus.FULL
    # Zero capacity with a zero-size request is not "limited"
    if total_capacity > 0 and available_capacity / total_capacity < limited_threshold:
        return SlotStatus.LIMITED
    return SlotStatus.AVAILABLE


def slot_times(open_time: str, close_time: str, interval: int) -> List[int]:
    """Start minutes from open, every interval, strictly before close."""
    if interval <= 0:
        raise InvalidConfigurationError("bookingInterval must be positive")
    start = parse_clock(open_time)
    end = parse_clock(close_time)
    return list(range(start, end, interval))


def compute_slots(
    restaurant: Union[RestaurantSchedule, Any],
    reservations_on_date: Sequence[Any],
    target_date: date,
    requested_party_size: int,
    policy: AvailabilityPolicy = AvailabilityPolicy(),
) -> List[Slot]:
    """
    Compute bookable slots for a restaurant on a date.

    Args:
        restaurant: RestaurantSchedule, or any restaurant record
            (ORM row, schema or dict) to build one from
        reservations_on_date: Reservations for this restaurant on
            target_date, already filtered by the caller
        target_date: Calendar date to compute slots for
        requested_party_size: Size of the party trying to book
        policy: Classification threshold and counting switches

    Returns:
        Slots ordered by time; empty when the restaurant is closed or
        the date is blocked.

    Raises:
        InvalidConfigurationError: If the restaurant configuration is
            incomplete or malformed
        ValueError: If requested_party_size is not positive
    """
    if requested_party_size <= 0:
        raise ValueError("requested_party_size must be positive")

    schedule = (
        restaurant
        if isinstance(restaurant, RestaurantSchedule)
        else RestaurantSchedule.from_record(restaurant)
    )

    if policy.honor_blocked_dates and target_date in schedule.blocked_dates:
        return []

    hours = schedule.hours_for(target_date)
    if hours.closed:
        return []

    parties = [
        r if isinstance(r, BookedParty) else BookedParty.from_record(r)
        for r in reservations_on_date
    ]
    total_capacity = schedule.total_capacity

    slots = []
    for minute in slot_times(hours.open, hours.close, schedule.booking_interval):
        occupied = occupancy_at(
            minute,
            parties,
            schedule.avg_dining_duration,
            count_cancelled=policy.count_cancelled,
        )
        available = total_capacity - occupied
        slots.append(
            Slot(
                time=format_clock(minute),
                available_capacity=available,
                total_capacity=total_capacity,
                status=classify(
                    available,
                    total_capacity,
                    requested_party_size,
                    policy.limited_threshold,
                ),
            )
        )
    return slots


def bookable_dates(
    restaurant: Union[RestaurantSchedule, Any],
    today: date,
    days: int = 14,
    honor_blocked_dates: bool = True,
) -> List[BookableDate]:
    """
    Dates a customer may pick, starting today.

    Limited to `days` entries and to the restaurant's maxDaysAdvance.
    """
    schedule = (
        restaurant
        if isinstance(restaurant, RestaurantSchedule)
        else RestaurantSchedule.from_record(restaurant)
    )
    horizon = min(days, schedule.max_days_advance + 1)
    result = []
    for offset in range(max(horizon, 0)):
        day = today + timedelta(days=offset)
        result.append(
            BookableDate(
                date=day,
                weekday=weekday_name(day),
                is_closed=schedule.is_closed_on(day, honor_blocked_dates),
            )
        )
    return result


def _read(source: Any, name: str, *default: Any) -> Any:
    """Read a snake_case field from a mapping or an object."""
    if isinstance(source, Mapping):
        if name in source:
            return source[name]
        camel = _to_camel(name)
        if camel in source:
            return source[camel]
    elif hasattr(source, name):
        return getattr(source, name)
    if default:
        return default[0]
    raise InvalidConfigurationError(f"Missing field {_to_camel(name)!r}")


def _to_camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def _as_int(value: Any, label: str) -> int:
    if isinstance(value, bool):
        raise InvalidConfigurationError(f"{label} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidConfigurationError(f"{label} must be an integer") from None


def _as_date(value: Any) -> date:
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        raise InvalidConfigurationError(f"Invalid blocked date {value!r}") from None
