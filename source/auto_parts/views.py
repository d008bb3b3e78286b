"""Read access to the customer orders view and explicit updates on the tables behind it."""

from typing import List, Optional

from sqlalchemy import (
    Column,
    Date,
    Enum,
    Integer,
    MetaData,
    Numeric,
    String,
    Table,
    select,
)
from sqlalchemy.engine import Row
from sqlalchemy.orm import Session

from auto_parts.exceptions import InvalidStatusError, OrderNotFoundError
from auto_parts.logger import Logger
from auto_parts.models import CUSTOMER_ORDERS_VIEW, Order, OrderStatus

logger = Logger.get_logger(__name__)

# Kept out of Base.metadata so create_all never emits a CREATE TABLE for it
view_metadata = MetaData()

customer_orders = Table(
    CUSTOMER_ORDERS_VIEW,
    view_metadata,
    Column("order_id", Integer, primary_key=True),
    Column("first_name", String(255)),
    Column("last_name", String(255)),
    Column("order_date", Date),
    Column("total_amount", Numeric(10, 2)),
    Column(
        "status",
        Enum(
            OrderStatus,
            values_callable=lambda statuses: [s.value for s in statuses],
            native_enum=False,
            create_constraint=False,
        ),
    ),
)


def list_customer_orders(
    session: Session,
    status: Optional[OrderStatus] = None,
    customer_id: Optional[int] = None,
) -> List[Row]:
    """Return customer order rows, optionally narrowed to a status or a customer."""
    query = session.query(customer_orders)
    if status is not None:
        query = query.filter(customer_orders.c.status == status)
    if customer_id is not None:
        # The view does not expose customer_id, so filter through the base table
        query = query.filter(
            customer_orders.c.order_id.in_(
                select(Order.order_id).where(Order.customer_id == customer_id)
            )
        )
    return query.order_by(customer_orders.c.order_id).all()


def get_customer_order(session: Session, order_id: int) -> Row:
    row = (
        session.query(customer_orders)
        .filter(customer_orders.c.order_id == order_id)
        .one_or_none()
    )
    if row is None:
        raise OrderNotFoundError(order_id)
    return row


def update_order_status(session: Session, order_id: int, status: OrderStatus) -> Order:
    """Change an order's status on the orders table and commit."""
    try:
        new_status = OrderStatus(status)
    except ValueError:
        raise InvalidStatusError(status) from None

    order = session.get(Order, order_id)
    if order is None:
        raise OrderNotFoundError(order_id)

    old_status = order.status
    order.status = new_status
    session.commit()
    logger.info(f"Order {order_id} status: {old_status.value} -> {order.status.value}")
    return order
