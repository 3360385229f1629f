"""Authentication endpoint tests."""

from pathlib import Path

from fastapi.testclient import TestClient
from sqlalchemy import create_engine, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from pickfoo.db import session as db_session
from pickfoo.db.base import Base
from pickfoo.main import app
from pickfoo.models import User


def _build_test_engine(db_file: Path) -> Engine:
    return create_engine(
        f"sqlite:///{db_file}",
        connect_args={"check_same_thread": False},
    )


def test_register_creates_owner(tmp_path: Path, monkeypatch) -> None:
    """Register should create an owner account and return identity fields."""
    engine = _build_test_engine(tmp_path / "test_register.db")
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)

    monkeypatch.setattr(db_session, "engine", engine)
    monkeypatch.setattr(db_session, "SessionLocal", testing_session_local)

    with TestClient(app) as client:
        response = client.post(
            "/api/v1/auth/register",
            json={"name": "Asha", "email": "Owner@Example.com", "password": "secret123"},
        )

    assert response.status_code == 201
    body = response.json()
    assert body["id"] > 0
    assert body["email"] == "owner@example.com"
    assert body["role"] == "OWNER"

    with testing_session_local() as db:
        user = db.scalar(select(User).where(User.id == int(body["id"])).limit(1))
        assert user is not None
        assert user.password_hash != "secret123"


def test_register_rejects_duplicates_and_admin_role(tmp_path: Path, monkeypatch) -> None:
    """Only owners can self-register, and only once per email."""
    engine = _build_test_engine(tmp_path / "test_register_rules.db")
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)

    monkeypatch.setattr(db_session, "engine", engine)
    monkeypatch.setattr(db_session, "SessionLocal", testing_session_local)

    with TestClient(app) as client:
        first = client.post("/api/v1/auth/register", json={"email": "dup@example.com", "password": "secret123"})
        duplicate = client.post("/api/v1/auth/register", json={"email": "dup@example.com", "password": "secret123"})
        admin = client.post(
            "/api/v1/auth/register",
            json={"email": "boss@example.com", "password": "secret123", "role": "admin"},
        )
        unknown = client.post(
            "/api/v1/auth/register",
            json={"email": "who@example.com", "password": "secret123", "role": "courier"},
        )

    assert first.status_code == 201
    assert duplicate.status_code == 400
    assert admin.status_code == 400
    assert unknown.status_code == 400


def test_login_returns_token(tmp_path: Path, monkeypatch) -> None:
    """Login should return a bearer access token for valid credentials."""
    engine = _build_test_engine(tmp_path / "test_login.db")
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)

    monkeypatch.setattr(db_session, "engine", engine)
    monkeypatch.setattr(db_session, "SessionLocal", testing_session_local)

    with TestClient(app) as client:
        register_response = client.post(
            "/api/v1/auth/register",
            json={"email": "login@example.com", "password": "secret123"},
        )
        assert register_response.status_code == 201

        login_response = client.post(
            "/api/v1/auth/login",
            json={"email": "login@example.com", "password": "secret123"},
        )
        wrong_password = client.post(
            "/api/v1/auth/login",
            json={"email": "login@example.com", "password": "nope"},
        )

    assert login_response.status_code == 200
    payload = login_response.json()
    assert isinstance(payload.get("access_token"), str)
    assert payload.get("token_type") == "bearer"
    assert wrong_password.status_code == 401


def test_me_returns_current_user(tmp_path: Path, monkeypatch) -> None:
    """Authenticated me endpoint should return the logged-in user."""
    engine = _build_test_engine(tmp_path / "test_me.db")
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)

    monkeypatch.setattr(db_session, "engine", engine)
    monkeypatch.setattr(db_session, "SessionLocal", testing_session_local)

    with TestClient(app) as client:
        client.post(
            "/api/v1/auth/register",
            json={"email": "me@example.com", "password": "secret123"},
        )
        login_response = client.post(
            "/api/v1/auth/login",
            json={"email": "me@example.com", "password": "secret123"},
        )
        token = login_response.json()["access_token"]
        me_response = client.get(
            "/api/v1/auth/me",
            headers={"Authorization": f"Bearer {token}"},
        )
        bad_token = client.get(
            "/api/v1/auth/me",
            headers={"Authorization": "Bearer not-a-token"},
        )

    assert me_response.status_code == 200
    me_payload = me_response.json()
    assert me_payload["email"] == "me@example.com"
    assert me_payload["role"] == "OWNER"
    assert isinstance(me_payload["id"], int)
    assert bad_token.status_code == 401
