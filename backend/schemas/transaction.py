# backend/schemas/transaction.py
from datetime import date, datetime
from typing import Optional
from pydantic import Field, field_validator

from schemas.base import CamelModel
from services import exceptions
from services.ledger import normalize_expiration_date


# Request body for receiving stock
class IncomingCreate(CamelModel):
    product_name: str = Field(min_length=1)
    quantity: int = Field(gt=0, strict=True)
    expiration_date: date

    # Accepts full ISO datetimes too; they are reduced to a UTC date
    @field_validator("expiration_date", mode="before")
    @classmethod
    def normalize_date(cls, v):
        try:
            return normalize_expiration_date(v)
        except exceptions.ValidationError as e:
            raise ValueError(e.message)


# Request body for issuing stock to an employee
class OutgoingCreate(CamelModel):
    product_name: str = Field(min_length=1)
    quantity: int = Field(gt=0, strict=True)
    employee_name: str = Field(min_length=1)
    employee_phone: str = Field(min_length=1)


class IncomingOut(CamelModel):
    id: int
    product_name: Optional[str] = None
    quantity: int
    expiration_date: date
    created_at: Optional[datetime] = None


class OutgoingOut(CamelModel):
    id: int
    product_name: Optional[str] = None
    quantity: int
    employee_name: Optional[str] = None
    employee_phone: Optional[str] = None
    created_at: Optional[datetime] = None
