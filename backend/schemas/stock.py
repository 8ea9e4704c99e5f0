# backend/schemas/stock.py
from datetime import date, datetime
from typing import Optional

from schemas.base import CamelModel


# A single expiry batch of a product
class StockOut(CamelModel):
    id: int
    product_id: int
    product_name: Optional[str] = None
    quantity: int
    expiration_date: date
    registration_date: Optional[datetime] = None


# Total quantity held across all batches of a product
class AvailableQuantity(CamelModel):
    product_name: str
    quantity: int
