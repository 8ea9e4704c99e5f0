# backend/schemas/employee.py
from typing import Optional
from pydantic import Field, field_validator

from schemas.base import CamelModel


class EmployeeCreate(CamelModel):
    employee_name: str = Field(min_length=1)
    department: str = Field(min_length=1)
    phone_number: str = Field(min_length=1)

    @field_validator("department")
    @classmethod
    def upper_department(cls, v: str) -> str:
        return v.strip().upper()


# Schema for partial employee updates
class EmployeeUpdate(CamelModel):
    employee_name: Optional[str] = Field(None, min_length=1)
    department: Optional[str] = Field(None, min_length=1)
    phone_number: Optional[str] = Field(None, min_length=1)

    @field_validator("department")
    @classmethod
    def upper_department(cls, v: Optional[str]) -> Optional[str]:
        return v.strip().upper() if v is not None else v


class EmployeeOut(CamelModel):
    id: int
    employee_name: str
    department: str
    phone_number: str
