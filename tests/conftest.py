from decimal import Decimal

import pytest
from sqlalchemy.orm import Session

from auto_parts.models import (
    Category,
    Customer,
    Order,
    OrderDetail,
    PaymentMethod,
    Product,
    Supplier,
)
from auto_parts.tools import get_engine, setup_database


@pytest.fixture
def db_url(tmp_path):
    return f"sqlite:///{tmp_path / 'shop.db'}"


@pytest.fixture
def engine(db_url):
    engine = get_engine(db_url)
    setup_database(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def shop(session):
    """A category, a supplier, two products and one customer."""
    category = Category(category_name="Brakes", description="Pads and rotors")
    supplier = Supplier(
        supplier_name="Midwest Auto Supply",
        contact_name="Dana Keller",
        phone="3125550142",
        email="orders@midwestauto.example",
        address="410 Lake St, Chicago, IL",
    )
    rotor = Product(
        name="Vented Brake Rotor",
        category=category,
        supplier=supplier,
        price=Decimal("100.00"),
        stock_quantity=25,
    )
    pads = Product(
        name="Ceramic Brake Pads",
        category=category,
        supplier=supplier,
        price=Decimal("50.00"),
        stock_quantity=40,
        warranty_period=24,
    )
    customer = Customer(
        first_name="Maria",
        last_name="Lopez",
        email="maria.lopez@example.com",
        phone="5035550171",
        address="17 Oak Ave, Portland, OR",
    )
    session.add_all([category, supplier, rotor, pads, customer])
    session.commit()
    return {
        "category": category,
        "supplier": supplier,
        "rotor": rotor,
        "pads": pads,
        "customer": customer,
    }


@pytest.fixture
def order(session, shop):
    """An order totalling 150.00: rotor at 10% off plus pads at full price."""
    order = Order(
        customer=shop["customer"],
        total_amount=Decimal("150.00"),
        payment_method=PaymentMethod.CREDIT_CARD,
        details=[
            OrderDetail(
                product=shop["rotor"],
                quantity=1,
                subtotal=Decimal("100.00"),
                discount=Decimal("10"),
            ),
            OrderDetail(product=shop["pads"], quantity=1, subtotal=Decimal("50.00")),
        ],
    )
    session.add(order)
    session.commit()
    return order
