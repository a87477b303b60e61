from decimal import Decimal

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator


def _parse_bool(v):
    if isinstance(v, str):
        return v.lower().strip('"').strip("'") in ("true", "1", "yes", "on")
    return bool(v)


class Settings(BaseSettings):
    APP_NAME: str = 'Villing'

    # Invoice math defaults
    DEFAULT_TAX_INCLUDED: bool = False
    DEFAULT_RETENTION: Decimal = Field(Decimal('0'), ge=0, le=100)

    # Payroll
    PAYROLL_TRANSPORT_AID_MONTHLY: Decimal = Decimal('162000')  # Auxilio de transporte sobre 30 días
    PAYROLL_MINIMUM_SALARY: Decimal = Decimal('1300000')

    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = True

    model_config = SettingsConfigDict(
        extra="allow",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True
    )

    @field_validator("DEBUG", mode="before")
    @classmethod
    def parse_debug(cls, v):
        return _parse_bool(v)

    @field_validator("DEFAULT_TAX_INCLUDED", mode="before")
    @classmethod
    def parse_tax_included(cls, v):
        return _parse_bool(v)

settings = Settings()
