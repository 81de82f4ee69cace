"""
Fixtures compartidas: base SQLite en memoria y cliente HTTP de pruebas.
"""

from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.config.database import Base, get_db
from app.main import app
from app.shared.database.models import User


@pytest.fixture
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


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def user(db_session) -> User:
    user = User(username="vendedor", email="vendedor@example.com")
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def sale_payload(user):
    return {
        "sale_number": "S-0001",
        "sale_date": datetime(2024, 5, 1, 10, 30).isoformat(),
        "customer": "Acme Ltda",
        "branch": "Centro",
        "created_by_id": user.id,
        "items": [
            {"product": "Cerveza", "quantity": 5, "unit_price": "10.00"},
            {"product": "Gaseosa", "quantity": 2, "unit_price": "3.50"},
        ],
    }
