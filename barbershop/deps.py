# barbershop/deps.py

from datetime import datetime

from fastapi import Depends, HTTPException, Request
from sqlmodel import Session

from .booking import BookingService
from .db import get_session
from .models import User
from .store import SqlStore


def get_store(session: Session = Depends(get_session)) -> SqlStore:
    return SqlStore(session)


def get_booking_service(request: Request, store: SqlStore = Depends(get_store)) -> BookingService:
    return BookingService(store, request.app.state.day_locks)


# Wall-clock "now"; overridden in tests
def get_now() -> datetime:
    return datetime.now()


def require_admin(user: User):
    if not user.is_admin:
        raise HTTPException(status_code=403, detail="Forbidden")


def require_self_or_admin(user: User, user_id: int):
    if user.id != user_id and not user.is_admin:
        raise HTTPException(status_code=403, detail="Forbidden")
