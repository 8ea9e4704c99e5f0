# backend/models/users.py
import enum
from sqlalchemy import Column, Integer, String, Enum
from database import Base

# Roles that can be granted to an account
class UserType(str, enum.Enum):
    ADMIN = "ADMIN"
    MANAGER = "MANAGER"

# Represents a user account with authentication details and system role
class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=False)
    type = Column(Enum(UserType), nullable=False, default=UserType.MANAGER)
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    phone_number = Column(String, nullable=True)
