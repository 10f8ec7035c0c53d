"""
Record Models

Pydantic models for the rows held in the record store and for the
payloads that create them.
"""

import re
from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field, field_validator

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class Role(str, Enum):
    """Profile roles."""
    ADMIN = "admin"
    USER = "user"


class Sale(BaseModel):
    """A recorded sale."""

    id: int
    user_id: str
    description: str
    quantity: int
    price: Decimal
    created_at: datetime

    @property
    def total(self) -> Decimal:
        return self.price * self.quantity


class Cost(BaseModel):
    """A recorded cost."""

    id: int
    user_id: str
    description: str
    amount: Decimal
    created_at: datetime


class Profile(BaseModel):
    """User profile with its role."""

    id: str
    email: str
    role: Role


class NewSale(BaseModel):
    """Payload for recording a sale."""

    description: str = Field(min_length=1, max_length=500)
    quantity: int = Field(ge=1)
    price: Decimal = Field(ge=0)

    @field_validator("description")
    @classmethod
    def strip_description(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("description must not be blank")
        return value


class NewCost(BaseModel):
    """Payload for recording a cost."""

    description: str = Field(min_length=1, max_length=500)
    amount: Decimal = Field(ge=0)

    @field_validator("description")
    @classmethod
    def strip_description(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("description must not be blank")
        return value


class Credentials(BaseModel):
    """Email and password pair for sign-in and account creation."""

    email: str
    password: str = Field(min_length=8)

    @field_validator("email")
    @classmethod
    def check_email(cls, value: str) -> str:
        value = value.strip().lower()
        if not EMAIL_PATTERN.match(value):
            raise ValueError("invalid email address")
        return value
