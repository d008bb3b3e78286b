"""Errors raised by the auto parts shop routines."""


class AutoPartsError(Exception):
    """Base class for shop errors."""


class OrderNotFoundError(AutoPartsError):
    """Raised when an operation references an order id that does not exist."""

    def __init__(self, order_id: int):
        self.order_id = order_id
        super().__init__(f"Order {order_id} does not exist")


class InvalidPaymentError(AutoPartsError):
    """Raised for payment amounts that cannot be applied to an order."""

    def __init__(self, amount):
        self.amount = amount
        super().__init__(f"Invalid payment amount: {amount}")


class PendingChangesError(AutoPartsError):
    """Raised when a routine that commits is handed a session with unflushed changes."""

    def __init__(self):
        super().__init__(
            "Session has pending changes; commit or roll them back before processing a payment"
        )


class InvalidStatusError(AutoPartsError, ValueError):
    """Raised for a value that is not an order status."""

    def __init__(self, status):
        self.status = status
        super().__init__(f"Invalid order status: {status!r}")
