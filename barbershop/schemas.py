# barbershop/schemas.py

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .models import AppointmentStatus


class CamelModel(BaseModel):
    # snake_case in Python, camelCase on the wire
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class UserCreate(CamelModel):
    username: str = Field(min_length=3)
    password: str = Field(min_length=8, max_length=72)
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    phone: str = ""


class UserUpdate(CamelModel):
    username: Optional[str] = Field(default=None, min_length=3)
    password: Optional[str] = Field(default=None, min_length=8, max_length=72)
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None


class UserPublic(CamelModel):
    id: int
    username: str
    first_name: str
    last_name: str
    phone: str
    is_admin: bool
    created_at: datetime


class ServicePublic(CamelModel):
    id: int
    name: str
    description: Optional[str] = None
    duration_minutes: int
    price: int


class AppointmentCreate(CamelModel):
    user_id: int
    service_id: int
    appointment_date: datetime


class AppointmentUpdate(CamelModel):
    model_config = ConfigDict(use_enum_values=True)

    service_id: Optional[int] = None
    appointment_date: Optional[datetime] = None
    status: Optional[AppointmentStatus] = None
    notification_sent: Optional[bool] = None


class AppointmentPublic(CamelModel):
    id: int
    user_id: int
    service_id: int
    appointment_date: datetime
    status: str
    notification_sent: bool
    created_at: datetime


class AvailabilityResponse(CamelModel):
    available_slots: List[datetime]


class ClientDetailUpdate(CamelModel):
    coffee_preference: Optional[str] = None
    last_haircut: Optional[str] = None
    appointment_count: Optional[int] = Field(default=None, ge=0)
    notes: Optional[str] = None


class ClientDetailPublic(CamelModel):
    id: int
    user_id: int
    coffee_preference: Optional[str] = None
    last_haircut: Optional[str] = None
    appointment_count: int
    notes: Optional[str] = None
