# barbershop/config.py

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_name: str = Field(default="BarberShop Booking API", alias="APP_NAME")

    # SQLite file next to the app; every request gets its own pooled connection
    database_url: str = Field(default="sqlite:///./barber.db", alias="DATABASE_URL")
    sql_echo: bool = Field(default=False, alias="SQL_ECHO")

    # Auth / JWT
    jwt_secret_key: str = Field(default="change-me-later", alias="JWT_SECRET_KEY")
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(default=30, alias="ACCESS_TOKEN_EXPIRE_MINUTES")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    seed_default_services: bool = Field(default=True, alias="SEED_DEFAULT_SERVICES")
    admin_username: Optional[str] = Field(default=None, alias="ADMIN_USERNAME")
    admin_password: Optional[str] = Field(default=None, alias="ADMIN_PASSWORD")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
