from decimal import Decimal

from sqlalchemy.orm import Session

from auto_parts.models import Customer, Order, OrderStatus
from auto_parts.routines import calculate_discounted_total
from data_generator.data_generator import DataGenerator


def test_generate_customer(engine, db_url):
    generator = DataGenerator(db_url=db_url, seed=7)
    with Session(engine) as session:
        customer = generator.generate_customer(session)

        assert session.query(Customer).count() == 1
        assert len(customer.phone) == 10
        assert customer.phone.isdigit()


def test_generate_order_needs_customers_and_products(engine, db_url):
    generator = DataGenerator(db_url=db_url, seed=7)
    with Session(engine) as session:
        assert generator.generate_order(session) is None
        assert generator.generate_payment(session) is None


def test_generate_order_totals_line_items(engine, db_url, shop):
    generator = DataGenerator(db_url=db_url, seed=11)
    with Session(engine) as session:
        order = generator.generate_order(session)

        assert order.status == OrderStatus.PENDING
        assert 1 <= len(order.details) <= 2
        assert order.total_amount == sum(d.subtotal for d in order.details)
        for detail in order.details:
            assert detail.subtotal == detail.product.price * detail.quantity
        assert calculate_discounted_total(session, order.order_id) <= order.total_amount


def test_generate_payment_settles_pending_orders(engine, db_url, shop):
    generator = DataGenerator(db_url=db_url, seed=3)
    with Session(engine) as session:
        for _ in range(5):
            generator.generate_order(session)

        results = [generator.generate_payment(session) for _ in range(20)]
        paid = session.query(Order).filter(Order.status == OrderStatus.PAID).count()

        assert results.count(True) == paid
        assert paid >= 1
        for order in session.query(Order).all():
            assert order.total_amount > Decimal("0")
