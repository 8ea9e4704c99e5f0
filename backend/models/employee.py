# backend/models/employee.py
from sqlalchemy import Column, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship
from database import Base

# Represents a clinic employee who receives stock on outgoing transactions
class Employee(Base):
    __tablename__ = "employees"

    id = Column(Integer, primary_key=True, index=True)
    employee_name = Column(String, nullable=False, index=True)
    department = Column(String, nullable=False) # Stored upper-case
    phone_number = Column(String, nullable=False)

    outgoing_transactions = relationship("OutgoingTransaction", back_populates="employee", passive_deletes="all")

    __table_args__ = (
        # An employee is identified by name + phone on outgoing transactions
        UniqueConstraint("employee_name", "phone_number", name="uq_employee_name_phone"),
    )
