"""
Pytest fixtures for the clinic IMS backend.

Provides:
- a fresh in-memory SQLite database per test (shared across threads via StaticPool)
- a FastAPI TestClient wired to that database
- users with bearer tokens for each role
- small factories for products, employees and stock receipts
"""

import os

# Settings are read at import time, keep tests away from the real database
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret")

from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import Base, get_db, init_db
from main import app
from models.employee import Employee
from models.product import Product
from models.users import User, UserType
from services.transactions import TransactionService
from utils.hashing import get_password_hash
from utils.tokenJWT import create_access_token


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session):
    def _make(email="admin@clinic.com", user_type=UserType.ADMIN, password="secret123"):
        user = User(
            email=email,
            password_hash=get_password_hash(password),
            type=user_type,
            first_name="Test",
            last_name=user_type.value.title(),
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user
    return _make


@pytest.fixture
def admin(make_user):
    return make_user("admin@clinic.com", UserType.ADMIN)


@pytest.fixture
def manager(make_user):
    return make_user("manager@clinic.com", UserType.MANAGER)


@pytest.fixture
def admin_headers(admin):
    return {"Authorization": f"Bearer {create_access_token(admin)}"}


@pytest.fixture
def manager_headers(manager):
    return {"Authorization": f"Bearer {create_access_token(manager)}"}


@pytest.fixture
def make_product(db_session):
    def _make(name="Gauze pads"):
        product = Product(product_name=name)
        db_session.add(product)
        db_session.commit()
        db_session.refresh(product)
        return product
    return _make


@pytest.fixture
def make_employee(db_session):
    def _make(name="Anna Kowalska", phone="600100200", department="SURGERY"):
        employee = Employee(employee_name=name, phone_number=phone, department=department)
        db_session.add(employee)
        db_session.commit()
        db_session.refresh(employee)
        return employee
    return _make


@pytest.fixture
def service(db_session):
    return TransactionService(db_session, max_retries=3)


@pytest.fixture
def receive(service):
    """Put stock on the shelf through the ledger: receive("Gauze pads", 5, date(2024, 1, 1))."""
    def _receive(product_name, quantity, expiration=date(2024, 1, 1)):
        return service.record_incoming(product_name, quantity, expiration)
    return _receive
