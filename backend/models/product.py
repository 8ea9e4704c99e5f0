# backend/models/product.py
from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from database import Base

# Represents a catalog product that stock batches and transactions point to
class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    product_name = Column(String, unique=True, nullable=False, index=True)

    # No cascades: a referenced product must not be deleted
    stocks = relationship("Stock", back_populates="product", passive_deletes="all")
    incoming_transactions = relationship("IncomingTransaction", back_populates="product", passive_deletes="all")
    outgoing_transactions = relationship("OutgoingTransaction", back_populates="product", passive_deletes="all")
