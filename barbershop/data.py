# barbershop/data.py

import logging

from sqlmodel import Session, select

from .auth import hash_password
from .config import Settings
from .models import ClientDetail, Service, User

logger = logging.getLogger(__name__)

# (name, description, minutes, cents)
DEFAULT_SERVICES = [
    ("Beard", "Professional beard trim and shaping", 20, 1500),
    ("Cut + Shampoo", "Tailored haircut with wash", 30, 2500),
    ("Beard Treatment", "Complete beard care treatment", 30, 2200),
    ("Hair Loss Treatment", "Targeted treatment against hair loss", 30, 3500),
    ("Cut + Shampoo + Beard", "Full hair and beard service", 40, 3500),
    ("Cut + Shampoo + Beard Treatment", "Premium package with intensive beard treatment", 45, 4500),
]


def seed_services(session: Session) -> int:
    if session.exec(select(Service)).first() is not None:
        return 0
    for name, description, minutes, cents in DEFAULT_SERVICES:
        session.add(Service(name=name, description=description, duration_minutes=minutes, price=cents))
    session.commit()
    return len(DEFAULT_SERVICES)


def seed_admin(session: Session, username: str, password: str) -> bool:
    existing = session.exec(select(User).where(User.username == username)).first()
    if existing is not None:
        return False
    admin = User(
        username=username,
        password_hash=hash_password(password),
        first_name="Admin",
        last_name="",
        is_admin=True,
    )
    session.add(admin)
    session.commit()
    session.refresh(admin)
    session.add(ClientDetail(user_id=admin.id))
    session.commit()
    return True


def seed(engine, settings: Settings) -> None:
    with Session(engine) as session:
        if settings.seed_default_services:
            added = seed_services(session)
            if added:
                logger.info("seed.services", extra={"count": added})
        if settings.admin_username and settings.admin_password:
            if seed_admin(session, settings.admin_username, settings.admin_password):
                logger.info("seed.admin", extra={"username": settings.admin_username})
