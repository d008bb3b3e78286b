"""SQLAlchemy ORM models for the auto parts shop catalog, customers, orders, and order details."""

import enum

from sqlalchemy import (
    DDL,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    event,
    func,
)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


class PaymentMethod(enum.Enum):
    """Accepted payment methods."""

    CREDIT_CARD = "Credit Card"
    PAYPAL = "PayPal"
    BITCOIN = "Bitcoin"
    CASH = "Cash"
    BANK_TRANSFER = "Bank Transfer"


class OrderStatus(enum.Enum):
    """Order lifecycle states."""

    PENDING = "Pending"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELED = "Canceled"
    PAID = "Paid"


def _enum_values(enum_class):
    return [member.value for member in enum_class]


def phone_constraints(table: str) -> tuple:
    """Ten digit phone check, rendered for each supported dialect."""
    name = f"ck_{table}_phone_digits"
    return (
        CheckConstraint("phone ~ '^[0-9]{10}$'", name=name).ddl_if(
            dialect="postgresql"
        ),
        CheckConstraint("phone REGEXP '^[0-9]{10}$'", name=name).ddl_if(
            dialect="mysql"
        ),
        CheckConstraint(
            "length(phone) = 10 AND phone NOT GLOB '*[^0-9]*'", name=name
        ).ddl_if(dialect="sqlite"),
    )


class Category(Base):
    """
    Category grouping products in the catalog.
    """

    __tablename__ = "categories"

    category_id = Column(Integer, primary_key=True, autoincrement=True)
    category_name = Column(String(255), nullable=False, unique=True)
    description = Column(Text)

    # Products are removed together with their category
    products = relationship(
        "Product",
        back_populates="category",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self):
        return f"<Category(id={self.category_id}, name='{self.category_name}')>"


class Supplier(Base):
    """
    Supplier providing products to the shop.
    """

    __tablename__ = "suppliers"

    supplier_id = Column(Integer, primary_key=True, autoincrement=True)
    supplier_name = Column(String(255), nullable=False, unique=True)
    contact_name = Column(String(255), nullable=False)
    phone = Column(String(10), nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    address = Column(String(255), nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    products = relationship(
        "Product",
        back_populates="supplier",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        *phone_constraints("suppliers"),
        Index("idx_suppliers_email", "email"),
    )

    def __repr__(self):
        return f"<Supplier(id={self.supplier_id}, name='{self.supplier_name}')>"


class Product(Base):
    """
    Product model representing auto parts available for purchase.
    """

    __tablename__ = "products"

    product_id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, unique=True)
    description = Column(Text)
    category_id = Column(
        Integer,
        ForeignKey("categories.category_id", ondelete="CASCADE"),
        nullable=False,
    )
    price = Column(Numeric(10, 2), nullable=False)
    stock_quantity = Column(Integer, nullable=False)
    supplier_id = Column(
        Integer,
        ForeignKey("suppliers.supplier_id", ondelete="CASCADE"),
        nullable=False,
    )
    warranty_period = Column(Integer, default=12, server_default="12")
    created_at = Column(DateTime, server_default=func.now())

    category = relationship("Category", back_populates="products")
    supplier = relationship("Supplier", back_populates="products")
    order_details = relationship(
        "OrderDetail",
        back_populates="product",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        CheckConstraint("price > 0", name="ck_products_price_positive"),
        CheckConstraint(
            "stock_quantity >= 0", name="ck_products_stock_non_negative"
        ),
        CheckConstraint(
            "warranty_period >= 0", name="ck_products_warranty_non_negative"
        ),
        Index("idx_products_category_id", "category_id"),
    )

    def __repr__(self):
        return (
            f"<Product(id={self.product_id}, name='{self.name}', price='{self.price}')>"
        )


class Customer(Base):
    """
    Customer model representing customer information in the shop.
    """

    __tablename__ = "customers"

    customer_id = Column(Integer, primary_key=True, autoincrement=True)
    first_name = Column(String(255), nullable=False)
    last_name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    phone = Column(String(10), nullable=False)
    address = Column(String(255), nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    # Relationship with orders
    orders = relationship(
        "Order",
        back_populates="customer",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        *phone_constraints("customers"),
        Index("idx_customers_email", "email"),
    )

    def __repr__(self):
        return (
            f"<Customer(id={self.customer_id}, "
            f"name='{self.first_name} {self.last_name}')>"
        )


class Order(Base):
    """
    Order model representing customer purchases.
    """

    __tablename__ = "orders"

    order_id = Column(Integer, primary_key=True, autoincrement=True)
    customer_id = Column(
        Integer,
        ForeignKey("customers.customer_id", ondelete="CASCADE"),
        nullable=False,
    )
    order_date = Column(Date, server_default=func.current_date())
    total_amount = Column(Numeric(10, 2), nullable=False)
    payment_method = Column(
        Enum(
            PaymentMethod,
            name="payment_method",
            values_callable=_enum_values,
            create_constraint=True,
        ),
        nullable=False,
    )
    status = Column(
        Enum(
            OrderStatus,
            name="order_status",
            values_callable=_enum_values,
            create_constraint=True,
        ),
        default=OrderStatus.PENDING,
        server_default=OrderStatus.PENDING.value,
    )

    # Relationship with customer and line items
    customer = relationship("Customer", back_populates="orders")
    details = relationship(
        "OrderDetail",
        back_populates="order",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        CheckConstraint("total_amount > 0", name="ck_orders_total_positive"),
        Index("idx_orders_customer_id", "customer_id"),
    )

    def __repr__(self):
        return (
            f"<Order(id={self.order_id}, customer_id={self.customer_id}, "
            f"total=${self.total_amount}, status={self.status})>"
        )


class OrderDetail(Base):
    """
    OrderDetail model linking a product to an order with quantity, subtotal and discount.
    """

    __tablename__ = "order_details"

    order_detail_id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(
        Integer,
        ForeignKey("orders.order_id", ondelete="CASCADE"),
        nullable=False,
    )
    product_id = Column(
        Integer,
        ForeignKey("products.product_id", ondelete="CASCADE"),
        nullable=False,
    )
    quantity = Column(Integer, nullable=False)
    subtotal = Column(Numeric(10, 2), nullable=False)
    discount = Column(Numeric(5, 2), default=0, server_default="0")

    order = relationship("Order", back_populates="details")
    product = relationship("Product", back_populates="order_details")

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_order_details_quantity_positive"),
        CheckConstraint("subtotal > 0", name="ck_order_details_subtotal_positive"),
        CheckConstraint(
            "discount >= 0 AND discount <= 100",
            name="ck_order_details_discount_range",
        ),
        Index("idx_orderdetails_order_product", "order_id", "product_id"),
    )

    def __repr__(self):
        return (
            f"<OrderDetail(order_id={self.order_id}, product_id={self.product_id}, "
            f"quantity={self.quantity}, discount={self.discount})>"
        )


CUSTOMER_ORDERS_VIEW = "vw_customer_orders"

_CUSTOMER_ORDERS_SELECT = (
    "AS SELECT o.order_id, c.first_name, c.last_name, o.order_date, "
    "o.total_amount, o.status "
    "FROM orders o JOIN customers c ON o.customer_id = c.customer_id"
)

# The view is not a table, so it is attached to the metadata lifecycle instead
event.listen(
    Base.metadata,
    "after_create",
    DDL(
        f"CREATE VIEW IF NOT EXISTS {CUSTOMER_ORDERS_VIEW} {_CUSTOMER_ORDERS_SELECT}"
    ).execute_if(dialect="sqlite"),
)
event.listen(
    Base.metadata,
    "after_create",
    DDL(
        f"CREATE OR REPLACE VIEW {CUSTOMER_ORDERS_VIEW} {_CUSTOMER_ORDERS_SELECT}"
    ).execute_if(dialect=("postgresql", "mysql", "mariadb")),
)
event.listen(
    Base.metadata,
    "before_drop",
    DDL(f"DROP VIEW IF EXISTS {CUSTOMER_ORDERS_VIEW}"),
)
