# backend/schemas/product.py
from pydantic import Field

from schemas.base import CamelModel


# Schema for creating or renaming a product
class ProductCreate(CamelModel):
    product_name: str = Field(min_length=1, max_length=255)


class ProductUpdate(ProductCreate):
    pass


class ProductOut(CamelModel):
    id: int
    product_name: str
