# backend/services/transactions.py
import logging
from typing import Callable, Optional, TypeVar

from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from models.transaction import IncomingTransaction, OutgoingTransaction
from services.exceptions import LedgerError, StoreFailure
from services.ledger import StockLedger
from utils.audit import write_log

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Write conflicts worth re-running against fresh state
RETRYABLE_ERRORS = (StaleDataError, IntegrityError, OperationalError)


class TransactionService:
    """Runs ledger operations as atomic, retried units of work.

    The session is injected by the caller (one per request in the API), and
    each operation either commits completely or leaves the database as it was.
    """

    def __init__(self, db: Session, max_retries: int = 3, user_id: Optional[int] = None, ip: Optional[str] = None):
        self.db = db
        self.ledger = StockLedger(db)
        self.max_retries = max(0, max_retries)
        self.user_id = user_id
        self.ip = ip

    def _run_atomic(self, action: str, work: Callable[[], T]) -> T:
        attempt = 0
        while True:
            try:
                result = work()
                self.db.commit()
                return result
            except LedgerError as e:
                self.db.rollback()
                logger.warning("%s rejected: %s (%s)", action, e.message, e.code)
                self._audit(action, "FAIL", meta={"code": e.code, "message": e.message, **e.details})
                raise
            except RETRYABLE_ERRORS as e:
                self.db.rollback()
                if attempt >= self.max_retries:
                    logger.exception("%s gave up after %d attempt(s)", action, attempt + 1)
                    raise StoreFailure("Server error", reason="conflict") from e
                attempt += 1
                logger.warning("%s hit a write conflict, retrying (%d/%d): %s", action, attempt, self.max_retries, e)
            except SQLAlchemyError as e:
                self.db.rollback()
                logger.exception("%s failed in the database", action)
                raise StoreFailure() from e

    def _audit(self, action: str, status: str, resource_id: Optional[int] = None, meta: Optional[dict] = None):
        try:
            write_log(self.db, user_id=self.user_id, action=action, resource="transactions",
                      resource_id=resource_id, status=status, ip=self.ip, meta=meta)
        except SQLAlchemyError:
            # The stock change is already committed; a lost audit row must not undo it
            self.db.rollback()
            logger.exception("Failed to write audit log for %s", action)

    def record_incoming(self, product_name: str, quantity: int, expiration_date) -> IncomingTransaction:
        txn = self._run_atomic(
            "STOCK_INCOMING",
            lambda: self.ledger.record_incoming(product_name, quantity, expiration_date),
        )
        logger.info("Received %s x %s (expires %s), transaction %s",
                    txn.quantity, product_name, txn.expiration_date, txn.id)
        self._audit("STOCK_INCOMING", "SUCCESS", resource_id=txn.id,
                    meta={"product_name": product_name, "quantity": txn.quantity,
                          "expiration_date": txn.expiration_date.isoformat()})
        return txn

    def record_outgoing(self, product_name: str, quantity: int, employee_name: str, employee_phone: str) -> OutgoingTransaction:
        txn = self._run_atomic(
            "STOCK_OUTGOING",
            lambda: self.ledger.record_outgoing(product_name, quantity, employee_name, employee_phone),
        )
        logger.info("Issued %s x %s to %s, transaction %s", txn.quantity, product_name, employee_name, txn.id)
        self._audit("STOCK_OUTGOING", "SUCCESS", resource_id=txn.id,
                    meta={"product_name": product_name, "quantity": txn.quantity,
                          "employee_name": employee_name, "employee_phone": employee_phone})
        return txn

    def get_available_quantity(self, product_name: str) -> int:
        return self.ledger.get_available_quantity(product_name)
