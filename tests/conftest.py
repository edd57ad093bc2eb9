"""
Pytest fixtures for the liquorpos API tests.

Every test gets a fresh in-memory SQLite database, seeded with the default
catalog, users and store settings, and an application instance with its own
cache and carts.
"""

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import liquorpos.models  # noqa: F401
from liquorpos.db.database import Base, get_db
from liquorpos.main import create_app
from liquorpos.models.catalog import Product, ProductCategory
from liquorpos.models.user import User
from liquorpos.services.cache import StoreCache
from liquorpos.services.identity import login_rate_limiter
from liquorpos.services.seed import SEED_PASSWORD, seed_database
from liquorpos.services.stores import ActivityLogStore, CatalogStore, SalesStore


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture()
def db_session(session_factory):
    session = session_factory()
    seed_database(session)
    yield session
    session.close()


@pytest.fixture(autouse=True)
def reset_login_limiter():
    login_rate_limiter.reset()
    yield
    login_rate_limiter.reset()


@pytest.fixture()
def app(session_factory, db_session):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    application = create_app(seed=False)
    application.dependency_overrides[get_db] = override_get_db
    yield application
    application.dependency_overrides.clear()


@pytest.fixture()
def client(app):
    return TestClient(app)


def login(client: TestClient, username: str, password: str = SEED_PASSWORD) -> dict[str, str]:
    response = client.post("/auth/login", json={"username": username, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture()
def admin_headers(client):
    return login(client, "admin")


@pytest.fixture()
def manager_headers(client):
    return login(client, "manager")


@pytest.fixture()
def cashier_headers(client):
    return login(client, "cashier")


@pytest.fixture()
def cache():
    return StoreCache()


@pytest.fixture()
def catalog(db_session, cache):
    return CatalogStore(db_session, cache)


@pytest.fixture()
def sales(db_session):
    return SalesStore(db_session)


@pytest.fixture()
def audit(db_session):
    return ActivityLogStore(db_session)


@pytest.fixture()
def cashier(db_session):
    return db_session.query(User).filter_by(username="cashier").one()


@pytest.fixture()
def make_product(db_session):
    counter = {"n": 0}

    def _make(**overrides) -> Product:
        counter["n"] += 1
        values = {
            "name": f"Test Product {counter['n']}",
            "category": ProductCategory.SNACKS,
            "price": Decimal("1000.00"),
            "cost_price": Decimal("600.00"),
            "stock": 10,
            "barcode": f"T-{counter['n']:04d}",
            "low_stock_threshold": 2,
        }
        values.update(overrides)
        product = Product(**values)
        db_session.add(product)
        db_session.commit()
        db_session.refresh(product)
        return product

    return _make
