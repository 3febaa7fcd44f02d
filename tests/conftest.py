"""
Pytest configuration for testing
"""

import json
import os
from datetime import datetime
from decimal import Decimal
from unittest.mock import MagicMock

import firebase_admin.auth  # noqa: F401  submodules must be loaded before they can be patched
import firebase_admin.firestore  # noqa: F401

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Create mock Firebase credentials before any imports
credentials_path = "/tmp/test-storefront-creds.json"
if not os.path.exists(credentials_path):
    os.makedirs(os.path.dirname(credentials_path), exist_ok=True)
    with open(credentials_path, "w") as f:
        json.dump({
            "type": "service_account",
            "project_id": "test-project",
            "private_key_id": "test-key-id",
            "client_email": "test@test-project.iam.gserviceaccount.com",
            "client_id": "123456789",
            "token_uri": "https://oauth2.googleapis.com/token",
        }, f)

# Set up environment variables for testing before any imports
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["FIREBASE_PROJECT_ID"] = "test-project"
os.environ["FIREBASE_CREDENTIALS_PATH"] = credentials_path
os.environ["ANALYTICS_ENABLED"] = "false"
os.environ["PLANS_CACHE_TTL_SECONDS"] = "300"


# Mock Firebase Admin before it's imported
@pytest.fixture(autouse=True)
def mock_firebase_admin(monkeypatch):
    """Mock Firebase Admin SDK to avoid initialization issues in tests"""
    mock_credentials = MagicMock()
    mock_credentials.Certificate.return_value = MagicMock()
    monkeypatch.setattr("firebase_admin.credentials.Certificate", mock_credentials.Certificate)

    mock_init = MagicMock()
    monkeypatch.setattr("firebase_admin.initialize_app", mock_init)

    mock_auth = MagicMock()
    monkeypatch.setattr("firebase_admin.auth", mock_auth)

    mock_firestore = MagicMock()
    monkeypatch.setattr("firebase_admin.firestore.client", mock_firestore)

    yield mock_auth


@pytest.fixture(scope="function")
def db_engine():
    """In-memory SQLite database shared by every session of one test"""
    from storefront.core.database import Base
    import storefront.models  # noqa: F401

    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)

    yield engine

    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture(scope="function")
def db_session(session_factory):
    """Create a new database session for a test"""
    session = session_factory()

    yield session

    session.rollback()
    session.close()


@pytest.fixture
def storage(db_session):
    from storefront.services.storage import Storage
    return Storage(db_session)


@pytest.fixture
def seeded_plans(storage):
    """The four canonical plans written to the test database"""
    from storefront.services.plan_catalog import seed_plans
    return {plan.slug: plan for plan in seed_plans(storage)}


@pytest.fixture
def merchant(db_session):
    """A user owning one store"""
    from storefront.models import Store, User

    user = User(id="merchant_1", email="merchant@example.com")
    store = Store(id="store_1", user_id=user.id, name="Loja Teste", slug="loja-teste")
    db_session.add_all([user, store])
    db_session.commit()
    return {"user": user, "store": store}


@pytest.fixture
def add_products(db_session):
    from storefront.models import Product

    def _add(store_id: str, count: int, is_active: bool = True):
        for i in range(count):
            db_session.add(Product(
                id=f"{store_id}_product_{i}_{is_active}",
                store_id=store_id,
                name=f"Produto {i}",
                price=Decimal("10.00"),
                is_active=is_active,
            ))
        db_session.commit()

    return _add


@pytest.fixture
def add_orders(db_session):
    from storefront.models import Order, OrderStatus

    counter = {"n": 0}

    def _add(store_id: str, count: int, created_at: datetime, status: OrderStatus = OrderStatus.PENDING):
        for _ in range(count):
            counter["n"] += 1
            db_session.add(Order(
                id=f"{store_id}_order_{counter['n']}",
                store_id=store_id,
                customer_email="cliente@example.com",
                total=Decimal("50.00"),
                status=status,
                created_at=created_at,
            ))
        db_session.commit()

    return _add


@pytest.fixture
def mock_current_user():
    """Mock current user for authenticated requests"""
    return {
        "uid": "merchant_1",
        "email": "merchant@example.com",
        "token": {"uid": "merchant_1"}
    }


@pytest.fixture
def client(session_factory, mock_current_user):
    """Test client bound to the in-memory database, authenticated as the merchant"""
    from fastapi.testclient import TestClient
    from storefront.main import app
    from storefront.core.database import get_db
    from storefront.core.middleware import get_current_user
    from storefront.services.plan_catalog import PlanCatalog
    from storefront.services.storage import SessionPlanSource

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    original_catalog = app.state.plan_catalog
    app.state.plan_catalog = PlanCatalog(SessionPlanSource(session_factory), ttl_seconds=0)
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user] = lambda: mock_current_user

    yield TestClient(app)

    app.dependency_overrides.clear()
    app.state.plan_catalog = original_catalog
