"""
Typed errors raised by the stock ledger.

Every failure of a ledger operation surfaces as exactly one of these kinds,
so the API layer can map it to a response without parsing messages:

    LedgerError (base)
    |
    +-- ValidationError      VALIDATION_ERROR    400
    +-- NotFound             NOT_FOUND           400
    +-- InsufficientStock    INSUFFICIENT_STOCK  400
    +-- StoreFailure         STORE_FAILURE       500

`ValidationError`, `NotFound` and `InsufficientStock` are terminal and never
retried. `StoreFailure` means the database was unavailable or the write kept
conflicting; the caller may retry it.
"""


class LedgerError(Exception):
    code: str = "LEDGER_ERROR"
    status_code: int = 500
    message: str = "Server error"

    def __init__(self, message=None, **details):
        self.message = message or self.message
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> dict:
        body = {"message": self.message, "code": self.code}
        if self.details:
            body["details"] = self.details
        return body


class ValidationError(LedgerError):
    """Missing or malformed input, e.g. a non-positive quantity."""

    code = "VALIDATION_ERROR"
    status_code = 400
    message = "Invalid request"


class NotFound(LedgerError):
    """A referenced product or employee does not exist."""

    code = "NOT_FOUND"
    status_code = 400
    message = "Not found"


class InsufficientStock(LedgerError):
    """Requested quantity exceeds what all batches of the product hold."""

    code = "INSUFFICIENT_STOCK"
    status_code = 400
    message = "Not enough stock available"

    def __init__(self, product_name: str, requested: int, available: int):
        super().__init__(product_name=product_name, requested=requested, available=available)
        self.product_name = product_name
        self.requested = requested
        self.available = available


class StoreFailure(LedgerError):
    code = "STORE_FAILURE"
    status_code = 500
    message = "Server error"
