# backend/routes/products.py
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from database import get_db
from utils.tokenJWT import get_current_user, admin_required
from utils.audit import write_log, client_ip
from models.users import User
from models.product import Product
from models.stock import Stock
from models.transaction import IncomingTransaction, OutgoingTransaction
import schemas.product as product_schemas

router = APIRouter(prefix="/api/products", tags=["Products"])

# ---- HELPERS ----
def _norm_name(name: str) -> str:
    return name.strip()

def _get_or_404(db: Session, product_id: int) -> Product:
    product = db.query(Product).filter(Product.id == product_id).first()
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product

def _ensure_name_free(db: Session, name: str, exclude_id: Optional[int] = None) -> None:
    q = db.query(Product).filter(Product.product_name == name)
    if exclude_id is not None:
        q = q.filter(Product.id != exclude_id)
    if q.first():
        raise HTTPException(status_code=400, detail="Product already exists")

def _is_referenced(db: Session, product_id: int) -> bool:
    for model in (Stock, IncomingTransaction, OutgoingTransaction):
        if db.query(model.id).filter(model.product_id == product_id).first():
            return True
    return False


@router.post("", response_model=product_schemas.ProductOut, status_code=status.HTTP_201_CREATED)
def create_product(
    payload: product_schemas.ProductCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_required),
):
    name = _norm_name(payload.product_name)
    _ensure_name_free(db, name)

    product = Product(product_name=name)
    db.add(product)
    db.commit()
    db.refresh(product)

    write_log(db, user_id=current_user.id, action="PRODUCT_CREATE", resource="products",
              resource_id=product.id, ip=client_ip(request), meta={"product_name": name})
    return product


@router.get("", response_model=List[product_schemas.ProductOut])
def list_products(
    q: Optional[str] = Query(None, description="Search by product name"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    query = db.query(Product)
    if q:
        query = query.filter(Product.product_name.ilike(f"%{q}%"))
    return query.order_by(Product.product_name.asc()).all()


@router.get("/{product_id}", response_model=product_schemas.ProductOut)
def get_product(
    product_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return _get_or_404(db, product_id)


@router.put("/{product_id}", response_model=product_schemas.ProductOut)
def update_product(
    product_id: int,
    payload: product_schemas.ProductUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_required),
):
    product = _get_or_404(db, product_id)
    name = _norm_name(payload.product_name)
    _ensure_name_free(db, name, exclude_id=product.id)

    old_name = product.product_name
    product.product_name = name
    db.commit()
    db.refresh(product)

    write_log(db, user_id=current_user.id, action="PRODUCT_UPDATE", resource="products",
              resource_id=product.id, ip=client_ip(request), meta={"old": old_name, "new": name})
    return product


# Products with stock or transaction history cannot be deleted
@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(
    product_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_required),
):
    product = _get_or_404(db, product_id)
    if _is_referenced(db, product.id):
        write_log(db, user_id=current_user.id, action="PRODUCT_DELETE", resource="products", resource_id=product.id,
                  status="FAIL", ip=client_ip(request), meta={"reason": "referenced"})
        raise HTTPException(status_code=409, detail="Product has stock or transactions and cannot be deleted")

    name = product.product_name
    db.delete(product)
    try:
        db.commit()
    except IntegrityError:
        # A transaction referencing the product was committed meanwhile
        db.rollback()
        raise HTTPException(status_code=409, detail="Product has stock or transactions and cannot be deleted")

    write_log(db, user_id=current_user.id, action="PRODUCT_DELETE", resource="products",
              resource_id=product_id, ip=client_ip(request), meta={"product_name": name})
    return Response(status_code=status.HTTP_204_NO_CONTENT)
