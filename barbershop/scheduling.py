# barbershop/scheduling.py

"""
Slot enumeration and conflict detection for the shop's single chair.

Everything here is pure: callers pass in the appointments of interest and a
``service_id -> duration`` mapping, and get back plain datetimes or booleans.
All datetimes are naive local wall-clock time.
"""

from datetime import date, datetime, time, timedelta
from typing import Iterable, List, Mapping, Optional, Tuple

from .errors import ValidationError
from .models import Appointment, AppointmentStatus, Service

OPEN_TIME = time(9, 0)
CLOSE_TIME = time(19, 30)
SLOT_MINUTES = 10

Interval = Tuple[datetime, datetime]


def overlaps(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> bool:
    # half-open: [10:00, 10:30) and [10:30, 11:00) do not overlap
    return a_start < b_end and b_start < a_end


def to_local_naive(value: datetime) -> datetime:
    if value.tzinfo is not None:
        value = value.astimezone().replace(tzinfo=None)
    return value


def parse_day(value: str) -> date:
    """Accepts ``YYYY-MM-DD`` or a full ISO 8601 timestamp."""
    try:
        return to_local_naive(datetime.fromisoformat(value.strip())).date()
    except ValueError:
        raise ValidationError(f"Invalid date: {value!r}")


def business_window(day: date) -> Interval:
    return datetime.combine(day, OPEN_TIME), datetime.combine(day, CLOSE_TIME)


def candidate_starts(day: date) -> List[datetime]:
    """Every grid-aligned start from opening up to and including closing."""
    open_dt, close_dt = business_window(day)
    step = timedelta(minutes=SLOT_MINUTES)

    starts = []
    current = open_dt
    while current <= close_dt:
        starts.append(current)
        current += step
    return starts


def occupied_intervals(
    day: date,
    appointments: Iterable[Appointment],
    durations: Mapping[int, int],
    exclude_id: Optional[int] = None,
) -> List[Interval]:
    intervals = []
    for a in appointments:
        if a.status == AppointmentStatus.cancelled.value:
            continue
        if exclude_id is not None and a.id == exclude_id:
            continue
        if a.appointment_date.date() != day:
            continue
        minutes = durations.get(a.service_id)
        if minutes is None:
            # Service no longer exists; nothing to measure the booking by
            continue
        intervals.append((a.appointment_date, a.appointment_date + timedelta(minutes=minutes)))
    return intervals


def compute_available_slots(
    day: date,
    service: Service,
    appointments: Iterable[Appointment],
    durations: Mapping[int, int],
    now: datetime,
) -> List[datetime]:
    _, close_dt = business_window(day)
    length = timedelta(minutes=service.duration_minutes)
    busy = occupied_intervals(day, appointments, durations)

    available = []
    for start in candidate_starts(day):
        # 1) No booking in the past
        if start < now:
            continue

        # 2) Service must finish by closing time
        end = start + length
        if end > close_dt:
            continue

        # 3) Subtract existing bookings
        if any(overlaps(start, end, b_start, b_end) for b_start, b_end in busy):
            continue

        available.append(start)

    return available


def has_conflict(
    start: datetime,
    service: Service,
    appointments: Iterable[Appointment],
    durations: Mapping[int, int],
    exclude_id: Optional[int] = None,
) -> bool:
    end = start + timedelta(minutes=service.duration_minutes)
    for b_start, b_end in occupied_intervals(start.date(), appointments, durations, exclude_id):
        if overlaps(start, end, b_start, b_end):
            return True
    return False


def validate_start(start: datetime, service: Service) -> None:
    open_dt, close_dt = business_window(start.date())

    if start < open_dt or start > close_dt:
        raise ValidationError("Appointment must be between 09:00 and 19:30")

    if start.minute % SLOT_MINUTES != 0 or start.second or start.microsecond:
        raise ValidationError("Appointment must be scheduled at 10-minute intervals")

    if start + timedelta(minutes=service.duration_minutes) > close_dt:
        raise ValidationError("Appointment must end by 19:30")
