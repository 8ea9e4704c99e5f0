# backend/routes/stock.py
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session, joinedload

from database import get_db
from models.stock import Stock
from models.product import Product
from models.users import User
from utils.tokenJWT import get_current_user
from services.exceptions import NotFound
from services.transactions import TransactionService
import schemas.stock as stock_schemas

router = APIRouter(prefix="/api/stocks", tags=["Stock"])


# Batches in FEFO order (earliest expiry first)
@router.get("", response_model=List[stock_schemas.StockOut])
def list_stocks(
    product_name: Optional[str] = Query(None, alias="productName"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    query = db.query(Stock).join(Product).options(joinedload(Stock.product))
    if product_name:
        query = query.filter(Product.product_name == product_name)
    return query.order_by(Product.product_name.asc(), Stock.expiration_date.asc(), Stock.id.asc()).all()


@router.get("/available/{product_name}", response_model=stock_schemas.AvailableQuantity)
def available_quantity(
    product_name: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        quantity = TransactionService(db).get_available_quantity(product_name)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=e.message)
    return {"product_name": product_name, "quantity": quantity}


@router.get("/{stock_id}", response_model=stock_schemas.StockOut)
def get_stock(
    stock_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    stock = db.query(Stock).filter(Stock.id == stock_id).first()
    if not stock:
        raise HTTPException(status_code=404, detail="Stock not found")
    return stock
