"""Foreman domain model."""

import re

from pydantic import BaseModel, Field, field_validator


PIN_PATTERN = re.compile(r"^\d{4}$")


class Foreman(BaseModel):
    """Crew lead allowed to sign in to the terminal."""

    name: str = Field(..., description="Unique display name, acts as identity")
    pin: str = Field(..., description="4-digit shared-knowledge PIN")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name cannot be empty")
        return v

    @field_validator("pin", mode="before")
    @classmethod
    def validate_pin(cls, v: object) -> str:
        pin = str(v).strip() if v is not None else ""
        if not PIN_PATTERN.match(pin):
            raise ValueError("PIN must be exactly 4 digits")
        return pin
