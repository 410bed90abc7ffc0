# barbershop/routers/users_routes.py

import logging
from typing import List

from fastapi import APIRouter, Depends, Response

from barbershop.auth import find_user_by_username, get_current_user, hash_password
from barbershop.deps import get_store, require_admin, require_self_or_admin
from barbershop.errors import ConflictError, NotFoundError
from barbershop.models import Appointment, ClientDetail, User
from barbershop.schemas import UserPublic, UserUpdate
from barbershop.store import SqlStore

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/users",
    tags=["users"],
)


@router.get("", response_model=List[UserPublic])
def list_clients(
    store: SqlStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    require_admin(current_user)
    return store.list(User, User.is_admin == False, order_by=User.last_name)  # noqa: E712


@router.put("/{user_id}", response_model=UserPublic)
def update_user(
    user_id: int,
    updates: UserUpdate,
    store: SqlStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    require_self_or_admin(current_user, user_id)

    db_user = store.get(User, user_id)
    if db_user is None:
        raise NotFoundError("User not found")

    changes = updates.model_dump(exclude_unset=True, exclude_none=True)

    if "username" in changes:
        existing = find_user_by_username(store, changes["username"])
        if existing is not None and existing.id != user_id:
            raise ConflictError("Username already exists")

    if "password" in changes:
        changes["password_hash"] = hash_password(changes.pop("password"))

    return store.update(db_user, changes)


@router.delete("/{user_id}", status_code=204)
def delete_user(
    user_id: int,
    store: SqlStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    require_self_or_admin(current_user, user_id)

    db_user = store.get(User, user_id)
    if db_user is None:
        raise NotFoundError("User not found")

    # Release the user's bookings before the user row goes
    for appointment in store.list(Appointment, Appointment.user_id == user_id):
        store.delete(appointment)
    for detail in store.list(ClientDetail, ClientDetail.user_id == user_id):
        store.delete(detail)
    store.delete(db_user)

    logger.info("users.deleted", extra={"user_id": user_id})
    return Response(status_code=204)
