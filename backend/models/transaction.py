# backend/models/transaction.py
from sqlalchemy import Column, Integer, Date, DateTime, ForeignKey, CheckConstraint, func
from sqlalchemy.orm import relationship
from database import Base

# Immutable record of a stock receipt
class IncomingTransaction(Base):
    __tablename__ = "incoming_transactions"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    quantity = Column(Integer, CheckConstraint("quantity > 0", name="ck_incoming_quantity_positive"), nullable=False)
    expiration_date = Column(Date, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    product = relationship("Product", back_populates="incoming_transactions")

    @property
    def product_name(self):
        return self.product.product_name if self.product else None


# Immutable record of stock issued to an employee
class OutgoingTransaction(Base):
    __tablename__ = "outgoing_transactions"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False, index=True)
    quantity = Column(Integer, CheckConstraint("quantity > 0", name="ck_outgoing_quantity_positive"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    product = relationship("Product", back_populates="outgoing_transactions")
    employee = relationship("Employee", back_populates="outgoing_transactions")

    @property
    def product_name(self):
        return self.product.product_name if self.product else None

    @property
    def employee_name(self):
        return self.employee.employee_name if self.employee else None

    @property
    def employee_phone(self):
        return self.employee.phone_number if self.employee else None
