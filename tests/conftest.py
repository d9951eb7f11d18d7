from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from pos_backend.database import get_db, init_db
from pos_backend.main import app
from pos_backend.models.product import Product
from pos_backend.schemas.order import OrderCreate, OrderItemCreate
from pos_backend.schemas.product import ProductCreate
from pos_backend.services import product_service


def _memory_engine(**kwargs):
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        **kwargs,
    )
    init_db(engine)
    return engine


@pytest.fixture
def engine():
    engine = _memory_engine()
    yield engine
    engine.dispose()


@pytest.fixture
def autocommit_engine():
    # Every statement commits on its own; order creation has to compensate
    engine = _memory_engine(execution_options={"isolation_level": "AUTOCOMMIT"})
    yield engine
    engine.dispose()


def _file_engine(path, **kwargs):
    engine = create_engine(
        f"sqlite:///{path}",
        connect_args={"check_same_thread": False, "timeout": 30},
        **kwargs,
    )
    init_db(engine)
    return engine


@pytest.fixture
def file_engine(tmp_path):
    engine = _file_engine(tmp_path / "pos.db")
    yield engine
    engine.dispose()


@pytest.fixture
def file_autocommit_engine(tmp_path):
    engine = _file_engine(tmp_path / "pos-autocommit.db", execution_options={"isolation_level": "AUTOCOMMIT"})
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    yield session
    session.close()


@pytest.fixture
def autocommit_db(autocommit_engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=autocommit_engine)()
    yield session
    session.close()


def make_product(db, name="Coffee", price="5.00", stock=10, **kwargs) -> Product:
    return product_service.create_product(
        db,
        ProductCreate(
            name=name,
            selling_price=Decimal(price),
            cost_price=Decimal(kwargs.pop("cost_price", "2.00")),
            stock=stock,
            **kwargs,
        ),
    )


def make_order(lines, tax="0", discount="0", total=None, final_total=None, payment_method="cash") -> OrderCreate:
    """Build an order request priced the way a well-behaved client would.

    ``lines`` is a list of ``(product, quantity)`` pairs.
    """
    items = [
        OrderItemCreate(product_id=p.id, quantity=q, subtotal=Decimal(str(p.selling_price)) * q)
        for p, q in lines
    ]
    computed = sum((item.subtotal for item in items), Decimal("0"))
    if total is None:
        total = computed
    if final_total is None:
        final_total = computed + Decimal(tax) - Decimal(discount)
    return OrderCreate(
        items=items,
        total=Decimal(str(total)),
        tax=Decimal(tax),
        discount=Decimal(discount),
        final_total=Decimal(str(final_total)),
        payment_method=payment_method,
    )


def stock_of(db, product_id) -> int:
    db.expire_all()
    return db.get(Product, product_id).stock


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()
