# backend/models/stock.py
from sqlalchemy import Column, Integer, Date, DateTime, ForeignKey, CheckConstraint, UniqueConstraint, func
from sqlalchemy.orm import relationship
from database import Base

# A batch of one product sharing one expiration date
class Stock(Base):
    __tablename__ = "stocks"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    quantity = Column(Integer, CheckConstraint("quantity >= 0", name="ck_stock_quantity_non_negative"), nullable=False)
    expiration_date = Column(Date, nullable=False, index=True)
    registration_date = Column(DateTime(timezone=True), server_default=func.now())

    # Optimistic lock: every UPDATE/DELETE is checked against the version read
    version_id = Column(Integer, nullable=False, default=1)

    product = relationship("Product", back_populates="stocks")

    __mapper_args__ = {"version_id_col": version_id}

    __table_args__ = (
        UniqueConstraint("product_id", "expiration_date", name="uq_stock_product_expiration"),
    )

    @property
    def product_name(self):
        return self.product.product_name if self.product else None
