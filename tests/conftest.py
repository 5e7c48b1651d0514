import os
from datetime import timedelta
from typing import Callable, Generator

# Override settings for tests before importing storefront modules
TEST_DATABASE_URL = "sqlite:///:memory:"
os.environ["DATABASE_URL"] = TEST_DATABASE_URL
os.environ["JWT_SECRET"] = "test-secret-key-for-testing-only"
os.environ["PAYMENT_PROCESSING_DELAY_SECONDS"] = "0"
os.environ["PAYMENT_EXPIRE_MINUTES"] = "30"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from storefront.api.auth import create_access_token, get_password_hash
from storefront.main import app
from storefront.models import CartItem, Payment, PaymentItem, Product, User
from storefront.models.database import Base, get_db
from storefront.models.user import ROLE_ADMIN, ROLE_USER
from storefront.services.clock import db_datetime, utcnow

# Create test database engine
test_engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Create a fresh database for each test."""
    Base.metadata.create_all(bind=test_engine)
    db_session = TestSessionLocal()
    try:
        yield db_session
    finally:
        db_session.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture(scope="function")
def client(db: Session) -> Generator[TestClient, None, None]:
    """Create a test client with database override."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def _create_user(db: Session, email: str, role: str = ROLE_USER) -> User:
    user = User(
        email=email,
        display_name=email.split("@")[0],
        hashed_password=get_password_hash("testpassword123"),
        role=role,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def _create_product(db: Session, name: str, price: int, stock: int) -> Product:
    product = Product(name=name, description=f"{name} description", price=price, stock=stock)
    db.add(product)
    db.commit()
    db.refresh(product)
    return product


@pytest.fixture
def make_product(db: Session) -> Callable[..., Product]:
    def factory(name: str, price: int, stock: int) -> Product:
        return _create_product(db, name, price, stock)

    return factory


@pytest.fixture
def add_cart_line(db: Session) -> Callable[..., CartItem]:
    def factory(user: User, product: Product, quantity: int) -> CartItem:
        item = CartItem(user_id=user.id, product_id=product.id, quantity=quantity)
        db.add(item)
        db.commit()
        db.refresh(item)
        return item

    return factory


@pytest.fixture
def make_payment(db: Session) -> Callable[..., Payment]:
    """Create a pending payment session directly, bypassing the cart."""

    def factory(user: User, lines: list[tuple[Product, int]], expires_in: timedelta) -> Payment:
        payment = Payment(
            user_id=user.id,
            reference=f"INV-TEST-{user.id}-{len(lines)}-{int(expires_in.total_seconds())}",
            amount=sum(product.price * quantity for product, quantity in lines),
            status="pending",
            expires_at=db_datetime(db, utcnow() + expires_in),
            items=[
                PaymentItem(
                    product_id=product.id,
                    product_name=product.name,
                    quantity=quantity,
                    price=product.price,
                )
                for product, quantity in lines
            ],
        )
        db.add(payment)
        db.commit()
        db.refresh(payment)
        return payment

    return factory


@pytest.fixture
def buyer(db: Session) -> User:
    return _create_user(db, "buyer@example.com")


@pytest.fixture
def buyer2(db: Session) -> User:
    return _create_user(db, "buyer2@example.com")


@pytest.fixture
def admin(db: Session) -> User:
    return _create_user(db, "admin@example.com", role=ROLE_ADMIN)


@pytest.fixture
def product(db: Session) -> Product:
    """The p1 product: price 10000, stock 5."""
    return _create_product(db, "Linen Shirt", price=10000, stock=5)


@pytest.fixture
def product2(db: Session) -> Product:
    return _create_product(db, "Canvas Tote", price=2500, stock=10)


@pytest.fixture
def auth_headers(client: TestClient, buyer: User) -> dict[str, str]:
    """Get auth headers for the buyer through the login endpoint."""
    response = client.post(
        "/api/auth/login",
        json={"email": "buyer@example.com", "password": "testpassword123"},
    )
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['accessToken']}"}


@pytest.fixture
def admin_headers(admin: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(admin.id)}"}
