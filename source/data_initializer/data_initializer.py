"""Script to initialize the auto parts shop schema and load CSV seed data into the database."""

import os
from datetime import datetime
from decimal import Decimal

import pandas as pd
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from auto_parts.config import get_data_dir, get_database_url, get_flag, get_int
from auto_parts.logger import Logger
from auto_parts.models import (
    Category,
    Customer,
    Order,
    OrderDetail,
    OrderStatus,
    PaymentMethod,
    Product,
    Supplier,
)
from auto_parts.tools import get_engine, reset_database, setup_database, wait_for_database

# Set up logger
logger = Logger.get_logger(__name__)

# Seed files, in foreign key order
CSV_FILES = {
    "categories": "categories.csv",
    "suppliers": "suppliers.csv",
    "products": "products.csv",
    "customers": "customers.csv",
    "orders": "orders.csv",
    "order_details": "order_details.csv",
}

# Columns that must stay text, per table (phone numbers may carry leading zeros)
TEXT_COLUMNS = {"suppliers": {"phone": str}, "customers": {"phone": str}}


def _optional(value):
    """Map pandas missing values to None."""
    return None if pd.isna(value) else value


def _money(value) -> Decimal:
    return Decimal(str(value))


class DataInitializer:
    """
    Class to create the shop schema, load CSV data, and insert records into the database.
    """

    def __init__(self, db_url: str, data_dir: str, reset: bool = False):
        self.db_url = db_url
        self.data_dir = data_dir
        self.reset = reset
        self.max_retries = get_int("MAX_RETRIES", 20)
        self.retry_delay = get_int("RETRY_DELAY", 2)

    def csv_path(self, table: str) -> str:
        return os.path.join(self.data_dir, CSV_FILES[table])

    def load_csv_data(self, file_path: str, dtype=None) -> pd.DataFrame:
        """Load data from a CSV file"""
        try:
            return pd.read_csv(file_path, dtype=dtype)
        except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
            logger.error(f"Error loading CSV file {file_path}: {e}")
            return pd.DataFrame()

    def insert_categories(self, session: Session, categories_df: pd.DataFrame) -> int:
        """Insert category data into the database"""
        inserted = 0
        for _, row in categories_df.iterrows():
            if session.get(Category, int(row["category_id"])) is None:
                session.add(
                    Category(
                        category_id=int(row["category_id"]),
                        category_name=row["category_name"],
                        description=_optional(row["description"]),
                    )
                )
                inserted += 1

        session.commit()
        logger.info(f"Inserted {inserted} categories")
        return inserted

    def insert_suppliers(self, session: Session, suppliers_df: pd.DataFrame) -> int:
        """Insert supplier data into the database"""
        inserted = 0
        for _, row in suppliers_df.iterrows():
            if session.get(Supplier, int(row["supplier_id"])) is None:
                session.add(
                    Supplier(
                        supplier_id=int(row["supplier_id"]),
                        supplier_name=row["supplier_name"],
                        contact_name=row["contact_name"],
                        phone=row["phone"],
                        email=row["email"],
                        address=row["address"],
                    )
                )
                inserted += 1

        session.commit()
        logger.info(f"Inserted {inserted} suppliers")
        return inserted

    def insert_products(self, session: Session, products_df: pd.DataFrame) -> int:
        """Insert product data into the database"""
        inserted = 0
        for _, row in products_df.iterrows():
            if session.get(Product, int(row["product_id"])) is None:
                product = Product(
                    product_id=int(row["product_id"]),
                    name=row["name"],
                    description=_optional(row["description"]),
                    category_id=int(row["category_id"]),
                    price=_money(row["price"]),
                    stock_quantity=int(row["stock_quantity"]),
                    supplier_id=int(row["supplier_id"]),
                )
                # Missing warranty falls back to the column default
                warranty_period = _optional(row["warranty_period"])
                if warranty_period is not None:
                    product.warranty_period = int(warranty_period)
                session.add(product)
                inserted += 1

        session.commit()
        logger.info(f"Inserted {inserted} products")
        return inserted

    def insert_customers(self, session: Session, customers_df: pd.DataFrame) -> int:
        """Insert customer data into the database"""
        inserted = 0
        for _, row in customers_df.iterrows():
            if session.get(Customer, int(row["customer_id"])) is None:
                session.add(
                    Customer(
                        customer_id=int(row["customer_id"]),
                        first_name=row["first_name"],
                        last_name=row["last_name"],
                        email=row["email"],
                        phone=row["phone"],
                        address=row["address"],
                    )
                )
                inserted += 1

        session.commit()
        logger.info(f"Inserted {inserted} customers")
        return inserted

    def insert_orders(self, session: Session, orders_df: pd.DataFrame) -> int:
        """Insert order data into the database"""
        inserted = 0
        for _, row in orders_df.iterrows():
            if session.get(Order, int(row["order_id"])) is None:
                order = Order(
                    order_id=int(row["order_id"]),
                    customer_id=int(row["customer_id"]),
                    total_amount=_money(row["total_amount"]),
                    payment_method=PaymentMethod(row["payment_method"]),
                )
                order_date = _optional(row["order_date"])
                if order_date is not None:
                    order.order_date = datetime.strptime(order_date, "%Y-%m-%d").date()
                status = _optional(row["status"])
                if status is not None:
                    order.status = OrderStatus(status)
                session.add(order)
                inserted += 1

        session.commit()
        logger.info(f"Inserted {inserted} orders")
        return inserted

    def insert_order_details(self, session: Session, details_df: pd.DataFrame) -> int:
        """Insert order line items into the database"""
        inserted = 0
        for _, row in details_df.iterrows():
            if session.get(OrderDetail, int(row["order_detail_id"])) is None:
                detail = OrderDetail(
                    order_detail_id=int(row["order_detail_id"]),
                    order_id=int(row["order_id"]),
                    product_id=int(row["product_id"]),
                    quantity=int(row["quantity"]),
                    subtotal=_money(row["subtotal"]),
                )
                discount = _optional(row["discount"])
                if discount is not None:
                    detail.discount = _money(discount)
                session.add(detail)
                inserted += 1

        session.commit()
        logger.info(f"Inserted {inserted} order details")
        return inserted

    def sync_sequences(self, session: Session) -> None:
        """Move PostgreSQL id sequences past the explicitly inserted ids"""
        if session.get_bind().dialect.name != "postgresql":
            return
        for model in (Category, Supplier, Product, Customer, Order, OrderDetail):
            table = model.__tablename__
            key = model.__mapper__.primary_key[0].name
            session.execute(
                text(
                    f"SELECT setval(pg_get_serial_sequence('{table}', '{key}'), "
                    f"COALESCE((SELECT MAX({key}) FROM {table}), 0) + 1, false)"
                )
            )
        session.commit()
        logger.info("Id sequences synchronized")

    def __call__(self) -> bool:
        """Main function to initialize"""
        engine = get_engine(self.db_url)

        # Wait for the database to be available
        if not wait_for_database(
            engine, max_retries=self.max_retries, delay=self.retry_delay
        ):
            return False

        # Set up database
        if self.reset:
            reset_database(engine)
        else:
            setup_database(engine)

        frames = {
            table: self.load_csv_data(self.csv_path(table), TEXT_COLUMNS.get(table))
            for table in CSV_FILES
        }
        empty = [table for table, frame in frames.items() if frame.empty]
        if empty:
            logger.error(f"CSV files could not be loaded for: {empty}. Exiting.")
            return False

        with Session(engine) as session:
            try:
                self.insert_categories(session, frames["categories"])
                self.insert_suppliers(session, frames["suppliers"])
                self.insert_products(session, frames["products"])
                self.insert_customers(session, frames["customers"])
                self.insert_orders(session, frames["orders"])
                self.insert_order_details(session, frames["order_details"])
                self.sync_sequences(session)
            except SQLAlchemyError as e:
                session.rollback()
                logger.error(f"Database error: {e}")
                return False

        logger.info("Initialization completed successfully")
        return True


if __name__ == "__main__":
    data_initializer = DataInitializer(
        db_url=get_database_url(),
        data_dir=get_data_dir(),
        reset=get_flag("RESET_DATABASE"),
    )
    data_initializer()
