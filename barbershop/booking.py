# barbershop/booking.py

import logging
import threading
import weakref
from contextlib import ExitStack, contextmanager
from datetime import date, datetime, timedelta
from typing import Dict, List, Optional

from .errors import ConflictError, NotFoundError, ValidationError
from .models import Appointment, AppointmentStatus, ClientDetail, Service, User
from .scheduling import compute_available_slots, has_conflict, to_local_naive, validate_start
from .store import Store

logger = logging.getLogger(__name__)

RESCHEDULE_FIELDS = ("appointment_date", "service_id")


def find_client_detail(store: Store, user_id: int) -> Optional[ClientDetail]:
    details = store.list(ClientDetail, ClientDetail.user_id == user_id)
    return details[0] if details else None


class DayLocks:
    """
    One lock per calendar day so check-then-insert cannot interleave.

    Locks are weakly held: a day's entry lives only while some request holds
    or waits on it.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: "weakref.WeakValueDictionary[date, threading.Lock]" = weakref.WeakValueDictionary()

    def __len__(self) -> int:
        return len(self._locks)

    def for_day(self, day: date) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(day)
            if lock is None:
                lock = threading.Lock()
                self._locks[day] = lock
            return lock

    @contextmanager
    def hold(self, *days: date):
        # sorted acquisition order, a reschedule may need two days at once
        with ExitStack() as stack:
            for day in sorted(set(days)):
                stack.enter_context(self.for_day(day))
            yield


class BookingService:
    def __init__(self, store: Store, locks: DayLocks):
        self.store = store
        self.locks = locks

    # -- lookups --------------------------------------------------------

    def get_service(self, service_id: int) -> Service:
        service = self.store.get(Service, service_id)
        if service is None:
            raise NotFoundError("Service not found")
        return service

    def get_appointment(self, appointment_id: int) -> Appointment:
        appointment = self.store.get(Appointment, appointment_id)
        if appointment is None:
            raise NotFoundError("Appointment not found")
        return appointment

    def durations(self) -> Dict[int, int]:
        return {s.id: s.duration_minutes for s in self.store.list(Service)}

    def appointments_on(self, day: date) -> List[Appointment]:
        day_start = datetime.combine(day, datetime.min.time())
        day_end = day_start + timedelta(days=1)
        return list(
            self.store.list(
                Appointment,
                Appointment.appointment_date >= day_start,
                Appointment.appointment_date < day_end,
                order_by=Appointment.appointment_date,
            )
        )

    # -- operations -----------------------------------------------------

    def available_slots(self, day: date, service_id: int, now: datetime) -> List[datetime]:
        service = self.get_service(service_id)
        return compute_available_slots(day, service, self.appointments_on(day), self.durations(), now)

    def book(self, user_id: int, service_id: int, start: datetime, now: datetime) -> Appointment:
        # 1) Validate service and user
        service = self.get_service(service_id)
        user = self.store.get(User, user_id)
        if user is None:
            raise NotFoundError("User not found")

        # 2) Validate business hours, grid alignment and the past
        start = to_local_naive(start)
        self._validate_timing(start, service, now)

        # 3) Conflict check and insert as one step for that day
        with self.locks.hold(start.date()):
            if has_conflict(start, service, self.appointments_on(start.date()), self.durations()):
                logger.info(
                    "booking.rejected_conflict",
                    extra={"user_id": user_id, "service_id": service_id, "start": start.isoformat()},
                )
                raise ConflictError("This time slot is already booked")

            appointment = self.store.insert(
                Appointment(
                    user_id=user_id,
                    service_id=service_id,
                    appointment_date=start,
                    status=AppointmentStatus.pending.value,
                )
            )

        self._record_visit(user_id, service)
        logger.info(
            "booking.created",
            extra={"appointment_id": appointment.id, "user_id": user_id, "start": start.isoformat()},
        )
        return appointment

    def update(self, appointment_id: int, changes: dict, now: datetime) -> Appointment:
        appointment = self.get_appointment(appointment_id)
        changes = dict(changes)

        new_status = changes.get("status")
        if new_status is not None:
            self._check_transition(appointment, new_status, now)
            if new_status == AppointmentStatus.completed.value:
                # Stand-in for the client notification
                changes["notification_sent"] = True

        moved = {
            key: changes[key]
            for key in RESCHEDULE_FIELDS
            if key in changes and changes[key] != getattr(appointment, key)
        }
        if "appointment_date" in moved:
            moved["appointment_date"] = to_local_naive(moved["appointment_date"])
            if moved["appointment_date"] == appointment.appointment_date:
                del moved["appointment_date"]

        for key in RESCHEDULE_FIELDS:
            changes.pop(key, None)

        if not moved:
            if new_status == AppointmentStatus.cancelled.value:
                self._cancel(appointment)
            updated = self.store.update(appointment, changes)
            logger.info("booking.updated", extra={"appointment_id": appointment_id, "fields": sorted(changes)})
            return updated

        if (new_status or appointment.status) != AppointmentStatus.pending.value:
            raise ValidationError("Only pending appointments can be rescheduled")

        start = moved.get("appointment_date", appointment.appointment_date)
        service = self.get_service(moved.get("service_id", appointment.service_id))
        self._validate_timing(start, service, now)

        with self.locks.hold(appointment.appointment_date.date(), start.date()):
            if has_conflict(
                start, service, self.appointments_on(start.date()), self.durations(), exclude_id=appointment.id
            ):
                raise ConflictError("This time slot is already booked")
            updated = self.store.update(appointment, {**changes, **moved})

        logger.info(
            "booking.rescheduled",
            extra={"appointment_id": appointment_id, "start": start.isoformat(), "service_id": service.id},
        )
        return updated

    def delete(self, appointment_id: int) -> None:
        appointment = self.get_appointment(appointment_id)
        user_id = appointment.user_id
        was_counted = appointment.status != AppointmentStatus.cancelled.value
        self.store.delete(appointment)

        # a cancelled tombstone was already taken off the client's count
        if was_counted:
            self._release_visit(user_id)

        logger.info("booking.deleted", extra={"appointment_id": appointment_id, "user_id": user_id})

    # -- helpers --------------------------------------------------------

    def client_detail(self, user_id: int) -> Optional[ClientDetail]:
        return find_client_detail(self.store, user_id)

    def _cancel(self, appointment: Appointment) -> None:
        # Conditional UPDATE so only one of two racing cancellations releases the visit
        claimed = self.store.update_where(
            Appointment,
            {"status": AppointmentStatus.cancelled.value},
            Appointment.id == appointment.id,
            Appointment.status == AppointmentStatus.pending.value,
        )
        if claimed:
            self._release_visit(appointment.user_id)

    def _record_visit(self, user_id: int, service: Service) -> None:
        counted = self.store.update_where(
            ClientDetail,
            {"appointment_count": ClientDetail.appointment_count + 1, "last_haircut": service.name},
            ClientDetail.user_id == user_id,
        )
        if not counted:
            self.store.insert(ClientDetail(user_id=user_id, appointment_count=1, last_haircut=service.name))

    def _release_visit(self, user_id: int) -> None:
        self.store.update_where(
            ClientDetail,
            {"appointment_count": ClientDetail.appointment_count - 1},
            ClientDetail.user_id == user_id,
            ClientDetail.appointment_count > 0,
        )

    @staticmethod
    def _validate_timing(start: datetime, service: Service, now: datetime) -> None:
        validate_start(start, service)
        if start < now:
            raise ValidationError("Cannot book an appointment in the past")

    @staticmethod
    def _check_transition(appointment: Appointment, new_status: str, now: datetime) -> None:
        current = appointment.status
        if new_status == current:
            return
        if current != AppointmentStatus.pending.value:
            raise ValidationError(f"Cannot change status of a {current} appointment")
        if new_status == AppointmentStatus.completed.value and appointment.appointment_date > now:
            raise ValidationError("Appointment cannot be completed before it starts")
