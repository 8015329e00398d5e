import os

# Must be set before storefront.database is imported
os.environ["DATABASE_URL"] = "sqlite:///./test_app.db"
os.environ["JWT_SECRET"] = "test-jwt-secret"
os.environ["SESSION_SECRET"] = "test-session-secret"
os.environ["STRIPE_SECRET_KEY"] = "sk_test_dummy"
os.environ["STRIPE_KEY"] = "pk_test_dummy"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from storefront.auth import verify_token
from storefront.database import Base
from storefront.main import app as fastapi_app
from storefront.models import Widget

SQLALCHEMY_DATABASE_URL = "sqlite:///./test_temp.db"
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={
                       "check_same_thread": False})
TestingSessionLocal = sessionmaker(
    autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db():
    session = TestingSessionLocal()
    yield session
    session.close()


@pytest.fixture
def raw_client(monkeypatch):
    monkeypatch.setattr("storefront.routes.SessionLocal", TestingSessionLocal)
    monkeypatch.setattr("storefront.api.SessionLocal", TestingSessionLocal)
    with TestClient(fastapi_app) as c:
        yield c


@pytest.fixture
def client(raw_client):
    # Bypass bearer token verification
    fastapi_app.dependency_overrides[verify_token] = lambda: 1
    yield raw_client
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def widgets(db):
    db.add_all([
        Widget(id=1, name="Widget", description="A very nice widget.",
               inventory_level=10, price=1000, is_recurring=False),
        Widget(id=2, name="Bronze Plan", description="Monthly bronze plan.",
               inventory_level=0, price=2000, is_recurring=True, plan_id="price_bronze"),
        Widget(id=3, name="Gadget", description="A gadget.",
               inventory_level=5, price=1000, is_recurring=False),
    ])
    db.commit()


@pytest.fixture
def stripe_lookups(mocker):
    """Patch the Stripe lookups made by the checkout workflow."""
    intent = mocker.Mock()
    intent.amount = 1000
    intent.currency = "usd"
    intent.latest_charge = "ch_123"

    method = mocker.Mock()
    method.card.last4 = "4242"
    method.card.exp_month = 12
    method.card.exp_year = 2030

    mocker.patch("storefront.checkout.retrieve_payment_intent", return_value=intent)
    mocker.patch("storefront.checkout.get_payment_method", return_value=method)
    return intent, method
