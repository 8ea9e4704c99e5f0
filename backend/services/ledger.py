# backend/services/ledger.py
"""
Stock ledger: how incoming and outgoing transactions change stock batches.

Stock for a product is split into batches, one per expiration date. Receipts
merge into the batch with the same expiry or open a new one. Issues deplete
batches first-expiry-first-out (FEFO); a batch that reaches zero is deleted.
The quantity held across a product's batches always equals everything
received minus everything issued.

The ledger only mutates the session it is given. Committing, rolling back and
retrying are the caller's job (see services.transactions).
"""
import logging
from datetime import date, datetime, timezone
from typing import List, NamedTuple, Optional, Sequence, Union

from sqlalchemy import func
from sqlalchemy.orm import Session

from models.employee import Employee
from models.product import Product
from models.stock import Stock
from models.transaction import IncomingTransaction, OutgoingTransaction
from services.exceptions import InsufficientStock, NotFound, ValidationError

logger = logging.getLogger(__name__)


class DepletionStep(NamedTuple):
    batch: Stock
    take: int
    exhausted: bool # True when the whole batch is consumed and must be deleted


def normalize_expiration_date(value: Union[str, date, datetime, None]) -> date:
    """Reduce an expiry to a calendar date.

    Timezone-aware values are converted to UTC first, so
    ``2024-03-01T23:30:00-05:00`` becomes ``2024-03-02``.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError("expirationDate is required")

    if isinstance(value, str):
        raw = value.strip()
        if raw.endswith(("Z", "z")):
            raw = raw[:-1] + "+00:00"
        try:
            value = datetime.fromisoformat(raw)
        except ValueError:
            raise ValidationError(f"Invalid expirationDate: {value!r}")

    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    if isinstance(value, date):
        return value

    raise ValidationError(f"Invalid expirationDate: {value!r}")


def require_positive_quantity(quantity) -> int:
    # bool is an int subclass, reject it explicitly
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise ValidationError("quantity must be an integer")
    if quantity <= 0:
        raise ValidationError("quantity must be greater than zero")
    return quantity


def plan_fefo_depletion(batches: Sequence[Stock], quantity: int, product_name: Optional[str] = None) -> List[DepletionStep]:
    """Work out which batches an issue of ``quantity`` consumes.

    Batches are walked earliest expiry first. Nothing is mutated here, so
    raising InsufficientStock leaves every batch untouched.
    """
    ordered = sorted(batches, key=lambda b: (b.expiration_date, b.id or 0))
    available = sum(b.quantity for b in ordered)
    if not ordered or available < quantity:
        raise InsufficientStock(product_name, requested=quantity, available=available)

    steps = []
    remaining = quantity
    for batch in ordered:
        if remaining <= 0:
            break
        if batch.quantity <= remaining:
            steps.append(DepletionStep(batch, batch.quantity, True))
            remaining -= batch.quantity
        else:
            steps.append(DepletionStep(batch, remaining, False))
            remaining = 0
    return steps


class StockLedger:
    def __init__(self, db: Session):
        self.db = db

    def _get_product(self, product_name: str) -> Product:
        product = self.db.query(Product).filter(Product.product_name == product_name).first()
        if not product:
            raise NotFound("Product not found", product_name=product_name)
        return product

    def _get_employee(self, employee_name: str, employee_phone: str) -> Employee:
        employee = (
            self.db.query(Employee)
            .filter(Employee.employee_name == employee_name, Employee.phone_number == employee_phone)
            .first()
        )
        if not employee:
            raise NotFound("Employee not found", employee_name=employee_name, employee_phone=employee_phone)
        return employee

    def _batches_query(self, product: Product, lock: bool = False):
        query = (
            self.db.query(Stock)
            .filter(Stock.product_id == product.id)
            .order_by(Stock.expiration_date.asc(), Stock.id.asc())
        )
        # Row locks on PostgreSQL; SQLite ignores FOR UPDATE and relies on version_id
        if lock:
            query = query.with_for_update()
        return query

    def list_batches(self, product_name: str) -> List[Stock]:
        product = self._get_product(product_name)
        return self._batches_query(product).all()

    def get_available_quantity(self, product_name: str) -> int:
        product = self._get_product(product_name)
        total = (
            self.db.query(func.coalesce(func.sum(Stock.quantity), 0))
            .filter(Stock.product_id == product.id)
            .scalar()
        )
        return int(total)

    def record_incoming(self, product_name: str, quantity: int, expiration_date) -> IncomingTransaction:
        quantity = require_positive_quantity(quantity)
        expiration = normalize_expiration_date(expiration_date)
        product = self._get_product(product_name)

        batch = (
            self.db.query(Stock)
            .filter(Stock.product_id == product.id, Stock.expiration_date == expiration)
            .with_for_update()
            .first()
        )
        if batch:
            batch.quantity += quantity
            logger.debug("Merged %s into batch %s of %s", quantity, batch.id, product_name)
        else:
            batch = Stock(product=product, quantity=quantity, expiration_date=expiration)
            self.db.add(batch)
            logger.debug("Opened new batch of %s expiring %s", product_name, expiration)

        transaction = IncomingTransaction(product=product, quantity=quantity, expiration_date=expiration)
        self.db.add(transaction)
        self.db.flush()
        return transaction

    def record_outgoing(self, product_name: str, quantity: int, employee_name: str, employee_phone: str) -> OutgoingTransaction:
        quantity = require_positive_quantity(quantity)
        product = self._get_product(product_name)
        employee = self._get_employee(employee_name, employee_phone)

        batches = self._batches_query(product, lock=True).all()
        plan = plan_fefo_depletion(batches, quantity, product_name=product.product_name)

        for step in plan:
            if step.exhausted:
                self.db.delete(step.batch)
            else:
                step.batch.quantity -= step.take
        logger.debug("Issued %s of %s from %d batch(es)", quantity, product_name, len(plan))

        transaction = OutgoingTransaction(product=product, employee=employee, quantity=quantity)
        self.db.add(transaction)
        self.db.flush()
        return transaction
