# barbershop/routers/auth_routes.py

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.security import OAuth2PasswordRequestForm

from barbershop.auth import create_access_token, find_user_by_username, get_current_user, hash_password, verify_password
from barbershop.deps import get_store
from barbershop.errors import ConflictError
from barbershop.models import ClientDetail, User
from barbershop.schemas import Token, UserCreate, UserPublic
from barbershop.store import SqlStore

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/auth",
    tags=["auth"],
)


@router.post("/register", status_code=201, response_model=UserPublic)
def register(
    user: UserCreate,
    store: SqlStore = Depends(get_store),
):
    # 1) Check if username already exists
    if find_user_by_username(store, user.username) is not None:
        raise ConflictError("Username already exists")

    # 2) Create user with an empty client record
    db_user = store.insert(
        User(
            username=user.username,
            password_hash=hash_password(user.password),
            first_name=user.first_name,
            last_name=user.last_name,
            phone=user.phone,
        )
    )
    store.insert(ClientDetail(user_id=db_user.id))

    logger.info("auth.registered", extra={"user_id": db_user.id})
    return db_user


@router.post("/login", response_model=Token)
def login(
    request: Request,
    form_data: OAuth2PasswordRequestForm = Depends(),
    store: SqlStore = Depends(get_store),
):
    user = find_user_by_username(store, form_data.username)

    if user is None or not verify_password(form_data.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid username or password")

    token = create_access_token({"sub": str(user.id)}, request.app.state.settings)
    return {"access_token": token, "token_type": "bearer"}


@router.get("/me", response_model=UserPublic)
def me(current_user: User = Depends(get_current_user)):
    return current_user
