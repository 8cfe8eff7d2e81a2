"""
Test configuration for the patient portal backend.
"""
import os

# Settings are read at import time, so the environment is prepared first
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ACCESS_TOKEN_SECRET", "test-access-secret")
os.environ.setdefault("REFRESH_TOKEN_SECRET", "test-refresh-secret")
os.environ.setdefault("MAIL_USERNAME", "portal")
os.environ.setdefault("MAIL_PASSWORD", "portal")
os.environ.setdefault("MAIL_FROM", "noreply@clinicmail.com")
os.environ.setdefault("MAIL_SERVER", "localhost")
os.environ.setdefault("FRONTEND_URL", "http://portal.clinicmail.com")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from portal.auth.dependencies import get_mail_sender
from portal.cards.exceptions import PaymentDeclinedException
from portal.cards.gateway import GatewayCard, mask_card_number
from portal.cards.router import get_payment_gateway
from portal.database import Base, get_db
from portal.main import app

TEST_DATABASE_URL = "sqlite://"

# Create test database engine
engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

# Create test session factory
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class FakeMailSender:
    """Records messages instead of sending them."""
    def __init__(self):
        self.sent = []

    async def send(self, recipients, subject, html_body):
        self.sent.append({"recipients": recipients, "subject": subject, "body": html_body})


class FakePaymentGateway:
    """Tokenizes every card unless told to decline."""
    def __init__(self):
        self.decline = False
        self.calls = 0

    async def tokenize(self, card):
        self.calls += 1
        if self.decline:
            raise PaymentDeclinedException()
        return GatewayCard(
            card_type="Visa",
            token=f"tok_{self.calls}",
            masked_number=mask_card_number(card.number)
        )


@pytest.fixture(scope="function")
def db():
    """
    Create a fresh database for each test.
    """
    Base.metadata.create_all(bind=engine)

    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()

    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def mail_sender():
    return FakeMailSender()


@pytest.fixture
def gateway():
    return FakePaymentGateway()


@pytest.fixture(scope="function")
def client(db, mail_sender, gateway):
    """
    Create a test client with a test database session and fake collaborators.
    """
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_mail_sender] = lambda: mail_sender
    app.dependency_overrides[get_payment_gateway] = lambda: gateway

    with TestClient(app) as client:
        yield client

    app.dependency_overrides = {}


def _register(client, email="patient@clinicmail.com", password="Password123!", **fields):
    return client.post("/api/v1/auth/register", json={"email": email, "password": password, **fields})


@pytest.fixture
def register(client):
    """Register through the API and return the response."""
    def _do(email="patient@clinicmail.com", password="Password123!", **fields):
        return _register(client, email, password, **fields)
    return _do


@pytest.fixture
def logged_in_client(client):
    """Client holding the session cookies of a freshly registered patient."""
    response = _register(client)
    assert response.json() == {"message": "OK"}
    return client
