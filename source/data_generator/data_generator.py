"""Script to simulate shop activity: new customers, placed orders, and order payments."""

import random
import time
from decimal import Decimal
from typing import Optional

from faker import Faker
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from auto_parts.config import get_database_url, get_int
from auto_parts.exceptions import AutoPartsError
from auto_parts.logger import Logger
from auto_parts.models import Customer, Order, OrderDetail, OrderStatus, PaymentMethod, Product
from auto_parts.routines import calculate_discounted_total, process_order_payment, to_money
from auto_parts.tools import get_engine, setup_database, wait_for_database

# Set up logger
logger = Logger.get_logger(__name__)

DISCOUNTS = [Decimal("0"), Decimal("0"), Decimal("5"), Decimal("10"), Decimal("15")]
ACTIONS = ["customer", "order", "payment", "order", "payment"]


class DataGenerator:
    """
    Class to generate random customers, orders and payments against the shop database.
    """

    def __init__(self, db_url: str, seed: Optional[int] = None):
        self.db_url = db_url

        self.faker = Faker()
        self.random = random.Random(seed)
        if seed is not None:
            self.faker.seed_instance(seed)

    def generate_customer(self, session: Session) -> Customer:
        """Generate a new customer"""
        customer = Customer(
            first_name=self.faker.first_name(),
            last_name=self.faker.last_name(),
            email=self.faker.unique.email(),
            phone=self.faker.numerify("##########"),
            address=self.faker.street_address(),
        )

        session.add(customer)
        session.commit()
        logger.info(f"Generated new customer: {customer}")
        return customer

    def generate_order(self, session: Session) -> Optional[Order]:
        """Generate a new order with one to three line items"""
        customers = session.query(Customer).all()
        if not customers:
            logger.info("No customers found")
            return None

        products = session.query(Product).all()
        if not products:
            logger.info("No products found")
            return None

        customer = self.random.choice(customers)
        selected_products = self.random.sample(
            products, min(self.random.randint(1, 3), len(products))
        )

        details = []
        for product in selected_products:
            quantity = self.random.randint(1, 3)
            details.append(
                OrderDetail(
                    product_id=product.product_id,
                    quantity=quantity,
                    subtotal=to_money(product.price * quantity),
                    discount=self.random.choice(DISCOUNTS),
                )
            )

        order = Order(
            customer_id=customer.customer_id,
            total_amount=sum(detail.subtotal for detail in details),
            payment_method=self.random.choice(list(PaymentMethod)),
            details=details,
        )

        session.add(order)
        session.commit()
        logger.info(f"Generated new order: {order} with {len(details)} items")
        return order

    def generate_payment(self, session: Session) -> Optional[bool]:
        """Pay a random pending order, occasionally with too little money"""
        pending = session.query(Order).filter(Order.status == OrderStatus.PENDING).all()
        if not pending:
            logger.info("No pending orders found")
            return None

        order = self.random.choice(pending)
        order_id = order.order_id
        amount = order.total_amount
        if self.random.random() < 0.2:
            # Customers sometimes pay only the discounted line total
            amount = calculate_discounted_total(session, order_id)

        return process_order_payment(session, order_id, amount)

    def __call__(self) -> None:
        """Main function to generate"""
        engine = get_engine(self.db_url)

        # Wait for the database to be available
        if not wait_for_database(
            engine, max_retries=get_int("MAX_RETRIES", 20), delay=get_int("RETRY_DELAY", 2)
        ):
            return

        # Set up database
        setup_database(engine=engine)

        while True:
            with Session(engine) as session:
                try:
                    action = self.random.choice(ACTIONS)

                    if action == "customer":
                        self.generate_customer(session)
                    elif action == "order":
                        self.generate_order(session)
                    elif action == "payment":
                        self.generate_payment(session)

                except (SQLAlchemyError, AutoPartsError) as e:
                    session.rollback()
                    logger.error(f"Error during {action}: {e}")

            wait_time = self.random.randint(0, 2)
            logger.info(f"Waiting {wait_time} seconds before next action...")
            time.sleep(wait_time)


if __name__ == "__main__":
    data_generator = DataGenerator(db_url=get_database_url())
    data_generator()
