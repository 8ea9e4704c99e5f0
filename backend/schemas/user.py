from pydantic import EmailStr, Field
from typing import Optional

from models.users import UserType
from schemas.base import CamelModel

# Schema for user authentication credentials
class UserLogin(CamelModel):
    email: EmailStr
    password: str

# Schema for user registration requests
class UserCreate(CamelModel):
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    email: EmailStr
    phone_number: Optional[str] = None
    password: str = Field(min_length=6)
    type: UserType = UserType.MANAGER

# Output schema for user profile details
class UserResponse(CamelModel):
    id: int
    email: str
    type: UserType
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone_number: Optional[str] = None

# Token plus the user it was issued for (register/login)
class AuthResponse(CamelModel):
    token: str
    token_type: str = "bearer"
    user: UserResponse
