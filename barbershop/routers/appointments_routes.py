# barbershop/routers/appointments_routes.py

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response

from barbershop.booking import BookingService
from barbershop.deps import get_booking_service, get_now
from barbershop.errors import ValidationError
from barbershop.models import Appointment
from barbershop.scheduling import parse_day
from barbershop.schemas import (
    AppointmentCreate,
    AppointmentPublic,
    AppointmentUpdate,
    AvailabilityResponse,
)

router = APIRouter(
    tags=["appointments"],
)


@router.get("/available-slots", response_model=AvailabilityResponse)
def available_slots(
    date: Optional[str] = None,
    service_id: Optional[str] = Query(default=None, alias="serviceId"),
    booking: BookingService = Depends(get_booking_service),
    now: datetime = Depends(get_now),
):
    if not date or not service_id:
        raise ValidationError("Date and serviceId are required")
    try:
        service_key = int(service_id)
    except ValueError:
        raise ValidationError("serviceId must be an integer")

    day = parse_day(date)
    slots = booking.available_slots(day, service_key, now)
    return {"available_slots": slots}


@router.get("/appointments", response_model=List[AppointmentPublic])
def list_appointments(
    user_id: Optional[int] = Query(default=None, alias="userId"),
    date: Optional[str] = None,
    booking: BookingService = Depends(get_booking_service),
):
    # userId takes precedence over date
    if user_id is not None:
        return booking.store.list(
            Appointment, Appointment.user_id == user_id, order_by=Appointment.appointment_date
        )
    if date:
        return booking.appointments_on(parse_day(date))
    return booking.store.list(Appointment, order_by=Appointment.appointment_date)


@router.get("/appointments/{appointment_id}", response_model=AppointmentPublic)
def get_appointment(
    appointment_id: int,
    booking: BookingService = Depends(get_booking_service),
):
    return booking.get_appointment(appointment_id)


@router.post("/appointments", response_model=AppointmentPublic, status_code=201)
def create_appointment(
    appt: AppointmentCreate,
    booking: BookingService = Depends(get_booking_service),
    now: datetime = Depends(get_now),
):
    return booking.book(appt.user_id, appt.service_id, appt.appointment_date, now)


@router.put("/appointments/{appointment_id}", response_model=AppointmentPublic)
def update_appointment(
    appointment_id: int,
    updates: AppointmentUpdate,
    booking: BookingService = Depends(get_booking_service),
    now: datetime = Depends(get_now),
):
    changes = updates.model_dump(exclude_unset=True, exclude_none=True)
    return booking.update(appointment_id, changes, now)


@router.delete("/appointments/{appointment_id}", status_code=204)
def delete_appointment(
    appointment_id: int,
    booking: BookingService = Depends(get_booking_service),
):
    booking.delete(appointment_id)
    return Response(status_code=204)
