"""Order payment processing and discount calculation."""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from auto_parts.exceptions import (
    InvalidPaymentError,
    OrderNotFoundError,
    PendingChangesError,
)
from auto_parts.logger import Logger
from auto_parts.models import Order, OrderDetail, OrderStatus

logger = Logger.get_logger(__name__)

CENTS = Decimal("0.01")
HUNDRED = Decimal("100")


def to_money(value) -> Decimal:
    """Convert value to a Decimal rounded to cents."""
    return Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP)


def process_order_payment(
    session: Session, order_id: int, payment_amount, nowait: bool = False
) -> bool:
    """
    Mark an order as Paid when payment_amount covers its total.

    The order row is read with a locking read and its state is reloaded from
    that read, so the comparison always uses the total held under the lock and
    concurrent payments for the same order run one after the other. A
    sufficient payment commits the new status; an insufficient one rolls back
    and leaves the order unchanged. With nowait=True a row already locked by
    another transaction fails immediately instead of blocking.

    The routine ends the session's transaction, so the session must not carry
    unflushed changes of its own.

    Returns True when the order was marked Paid, False otherwise.
    Raises OrderNotFoundError for an unknown order id, InvalidPaymentError
    for a negative or non-numeric amount and PendingChangesError when the
    session holds unrelated pending changes.
    """
    try:
        payment = Decimal(str(payment_amount))
    except InvalidOperation:
        raise InvalidPaymentError(payment_amount) from None
    if not payment.is_finite() or payment < 0:
        raise InvalidPaymentError(payment_amount)

    if session.new or session.dirty or session.deleted:
        raise PendingChangesError()

    try:
        order = (
            session.query(Order)
            .filter(Order.order_id == order_id)
            .with_for_update(nowait=nowait)
            .populate_existing()
            .one_or_none()
        )
        if order is None:
            session.rollback()
            logger.error(f"Payment rejected, order {order_id} not found")
            raise OrderNotFoundError(order_id)

        if payment >= order.total_amount:
            order.status = OrderStatus.PAID
            session.commit()
            logger.info(f"Order {order_id} paid with {payment}")
            return True

        total_amount = order.total_amount
        session.rollback()
        logger.warning(
            f"Payment of {payment} for order {order_id} is below total {total_amount}"
        )
        return False
    except SQLAlchemyError:
        session.rollback()
        raise


def calculate_discounted_total(session: Session, order_id: int) -> Decimal:
    """Sum of subtotal minus its discount percentage over an order's line items."""
    if not session.get_bind().dialect.supports_native_decimal:
        # SQLite sums NUMERIC columns as floats; add the exact line values instead
        lines = (
            session.query(OrderDetail.subtotal, OrderDetail.discount)
            .filter(OrderDetail.order_id == order_id)
            .all()
        )
        total = sum(
            (
                subtotal - subtotal * (discount or 0) / HUNDRED
                for subtotal, discount in lines
            ),
            Decimal("0"),
        )
        return to_money(total)

    discounted = OrderDetail.subtotal - (
        OrderDetail.subtotal * OrderDetail.discount / HUNDRED
    )
    total = (
        session.query(func.sum(discounted))
        .filter(OrderDetail.order_id == order_id)
        .scalar()
    )
    if total is None:
        return to_money(0)
    return to_money(total)
