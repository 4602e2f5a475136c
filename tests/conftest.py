import os
import tempfile

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "1"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="urban-harvest-uploads-")

from datetime import date, timedelta
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from urban_harvest.api import create_app
from urban_harvest.data import models
from urban_harvest.data.database import Base, engine, SessionLocal
from urban_harvest.services.rate_limiter import get_login_limiter
from urban_harvest.utils.security import hash_password, create_access_token


class InMemoryLoginLimiter:
    def __init__(self, max_attempts: int = 5):
        self.max_attempts = max_attempts
        self.failures = {}

    def is_blocked(self, client_id: str) -> bool:
        return self.failures.get(client_id, 0) >= self.max_attempts

    def register_failure(self, client_id: str):
        self.failures[client_id] = self.failures.get(client_id, 0) + 1

    def reset(self, client_id: str):
        self.failures.pop(client_id, None)


@pytest.fixture(autouse=True)
def _schema():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def limiter():
    return InMemoryLoginLimiter()


@pytest.fixture
def client(limiter):
    app = create_app()
    app.dependency_overrides[get_login_limiter] = lambda: limiter
    with TestClient(app) as c:
        yield c


def make_user(db, email: str, role: str = "customer", name: str = "Test User"):
    user = models.UserModel(
        name=name,
        email=email,
        password_hash=hash_password("Secret123"),
        role=role,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    token = create_access_token(user.user_id, user.email, user.role)
    return user, {"Authorization": f"Bearer {token}"}


@pytest.fixture
def customer(db):
    return make_user(db, "nimal@example.com", name="Nimal")


@pytest.fixture
def other_customer(db):
    return make_user(db, "kamala@example.com", name="Kamala")


@pytest.fixture
def admin(db):
    return make_user(db, "admin@urbanharvest.com", role="admin", name="Admin")


@pytest.fixture
def product(db):
    p = models.ProductModel(
        name="Organic Tomatoes",
        price=Decimal("400.00"),
        unit="kg",
        stock_quantity=5,
    )
    db.add(p)
    db.commit()
    db.refresh(p)
    return p


@pytest.fixture
def event(db):
    e = models.EventModel(
        title="Community Harvest Day",
        event_date=date.today() + timedelta(days=14),
        price=Decimal("500.00"),
        total_spots=10,
        spots_left=10,
    )
    db.add(e)
    db.commit()
    db.refresh(e)
    return e


@pytest.fixture
def workshop(db):
    w = models.WorkshopModel(
        title="Composting Basics",
        workshop_date=date.today() + timedelta(days=7),
        price=Decimal("1500.00"),
        total_spots=4,
        spots_left=4,
    )
    db.add(w)
    db.commit()
    db.refresh(w)
    return w


@pytest.fixture
def box(db):
    b = models.SubscriptionBoxModel(
        name="Veggie Box",
        description="Seasonal vegetables from local farms",
        price=Decimal("2500.00"),
        frequency="monthly",
        is_active=True,
    )
    b.items = [models.SubscriptionBoxItemModel(item_name="Carrots", quantity="1kg", display_order=1)]
    db.add(b)
    db.commit()
    db.refresh(b)
    return b
