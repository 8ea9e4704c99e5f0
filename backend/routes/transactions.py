# backend/routes/transactions.py
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session, joinedload

from config import settings
from database import get_db
from models.users import User
from models.product import Product
from models.transaction import IncomingTransaction, OutgoingTransaction
from utils.tokenJWT import get_current_user, staff_required
from utils.audit import client_ip
from services.transactions import TransactionService
import schemas.transaction as txn_schemas

router = APIRouter(prefix="/api/transactions", tags=["Transactions"])


# One service per request, bound to the request's session and acting user
def get_transaction_service(
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(staff_required),
) -> TransactionService:
    return TransactionService(
        db,
        max_retries=settings.LEDGER_MAX_RETRIES,
        user_id=current_user.id,
        ip=client_ip(request),
    )


@router.post("/incoming", response_model=txn_schemas.IncomingOut, status_code=status.HTTP_201_CREATED)
def create_incoming_transaction(
    payload: txn_schemas.IncomingCreate,
    service: TransactionService = Depends(get_transaction_service),
):
    return service.record_incoming(payload.product_name, payload.quantity, payload.expiration_date)


@router.post("/outgoing", response_model=txn_schemas.OutgoingOut, status_code=status.HTTP_201_CREATED)
def create_outgoing_transaction(
    payload: txn_schemas.OutgoingCreate,
    service: TransactionService = Depends(get_transaction_service),
):
    return service.record_outgoing(payload.product_name, payload.quantity, payload.employee_name, payload.employee_phone)


@router.get("/incoming", response_model=List[txn_schemas.IncomingOut])
def list_incoming_transactions(
    product_name: Optional[str] = Query(None, alias="productName"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    query = db.query(IncomingTransaction).options(joinedload(IncomingTransaction.product))
    if product_name:
        query = query.join(Product).filter(Product.product_name == product_name)
    return query.order_by(IncomingTransaction.id.asc()).all()


@router.get("/outgoing", response_model=List[txn_schemas.OutgoingOut])
def list_outgoing_transactions(
    product_name: Optional[str] = Query(None, alias="productName"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    query = db.query(OutgoingTransaction).options(
        joinedload(OutgoingTransaction.product), joinedload(OutgoingTransaction.employee)
    )
    if product_name:
        query = query.join(Product).filter(Product.product_name == product_name)
    return query.order_by(OutgoingTransaction.id.asc()).all()


@router.get("/incoming/{transaction_id}", response_model=txn_schemas.IncomingOut)
def get_incoming_transaction(
    transaction_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    txn = db.query(IncomingTransaction).filter(IncomingTransaction.id == transaction_id).first()
    if not txn:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return txn


@router.get("/outgoing/{transaction_id}", response_model=txn_schemas.OutgoingOut)
def get_outgoing_transaction(
    transaction_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    txn = db.query(OutgoingTransaction).filter(OutgoingTransaction.id == transaction_id).first()
    if not txn:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return txn
