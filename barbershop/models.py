# barbershop/models.py

from typing import Optional
from datetime import datetime
from enum import Enum

from sqlalchemy.types import DateTime
from sqlmodel import SQLModel, Field, Column


class AppointmentStatus(str, Enum):
    pending = "pending"
    completed = "completed"
    cancelled = "cancelled"


class User(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(index=True, unique=True)
    password_hash: str
    first_name: str
    last_name: str
    phone: str = ""
    is_admin: bool = False
    created_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))


class Service(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    description: Optional[str] = None
    duration_minutes: int
    price: int  # cents


class Appointment(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    user_id: int = Field(foreign_key="user.id", index=True)
    service_id: int = Field(foreign_key="service.id")
    # naive local wall-clock
    appointment_date: datetime = Field(sa_column=Column(DateTime(timezone=False), index=True, nullable=False))
    status: str = AppointmentStatus.pending.value
    notification_sent: bool = False
    created_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))


class ClientDetail(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    user_id: int = Field(foreign_key="user.id", unique=True)
    coffee_preference: Optional[str] = ""
    last_haircut: Optional[str] = ""
    appointment_count: int = 0
    notes: Optional[str] = ""
