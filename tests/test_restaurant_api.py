"""Restaurant profile API tests, including the manual override contract."""

from datetime import datetime
from pathlib import Path

from fastapi.testclient import TestClient
from sqlalchemy import create_engine, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from pickfoo.core.security import get_password_hash
from pickfoo.db import session as db_session
from pickfoo.db.base import Base
from pickfoo.main import app
from pickfoo.models import AuditLog, Restaurant, User
from pickfoo.services.reconciler import Reconciler
from pickfoo.services.restaurant_service import SqlRestaurantStore

WEEK = [{"day": day, "open_time": "09:00", "close_time": "22:00", "is_closed": False} for day in range(7)]
WEDNESDAY_NIGHT = datetime(2025, 1, 8, 23, 0)
WEDNESDAY_NOON = datetime(2025, 1, 8, 12, 0)


def _build_test_engine(db_file: Path) -> Engine:
    return create_engine(
        f"sqlite:///{db_file}",
        connect_args={"check_same_thread": False},
    )


def _setup_db(tmp_path: Path, monkeypatch, name: str) -> sessionmaker:
    engine = _build_test_engine(tmp_path / name)
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    monkeypatch.setattr(db_session, "engine", engine)
    monkeypatch.setattr(db_session, "SessionLocal", testing_session_local)
    return testing_session_local


def _owner_headers(client: TestClient, email: str = "owner@example.com") -> dict[str, str]:
    register_response = client.post(
        "/api/v1/auth/register",
        json={"name": "Owner", "email": email, "password": "secret123", "role": "owner"},
    )
    assert register_response.status_code == 201
    login_response = client.post("/api/v1/auth/login", json={"email": email, "password": "secret123"})
    assert login_response.status_code == 200
    return {"Authorization": f"Bearer {login_response.json()['access_token']}"}


def _admin_headers(client: TestClient, testing_session_local: sessionmaker) -> dict[str, str]:
    with testing_session_local() as db:
        db.add(
            User(
                email="admin@example.com",
                name="Admin",
                password_hash=get_password_hash("adminpass"),
                role="ADMIN",
                is_active=True,
            )
        )
        db.commit()
    login_response = client.post("/api/v1/auth/login", json={"email": "admin@example.com", "password": "adminpass"})
    assert login_response.status_code == 200
    return {"Authorization": f"Bearer {login_response.json()['access_token']}"}


def _create_restaurant(client: TestClient, headers: dict[str, str], **fields) -> dict:
    payload = {"name": "Spice Route", "fssai_license_number": "FSSAI-123", "opening_hours": WEEK}
    payload.update(fields)
    response = client.post("/api/v1/restaurants", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def _activate(testing_session_local: sessionmaker, restaurant_id: int) -> None:
    with testing_session_local() as db:
        db.get(Restaurant, restaurant_id).status = "active"
        db.commit()


def test_create_restaurant_starts_inactive_and_closed(tmp_path: Path, monkeypatch) -> None:
    _setup_db(tmp_path, monkeypatch, "test_create_restaurant.db")

    with TestClient(app) as client:
        headers = _owner_headers(client)
        body = _create_restaurant(client, headers, status="active", is_open=True)
        listing = client.get("/api/v1/restaurants/my-restaurants", headers=headers)
        mine = client.get("/api/v1/restaurants/my-restaurant", headers=headers)
        public = client.get(f"/api/v1/restaurants/{body['id']}")

    assert body["status"] == "inactive"
    assert body["is_open"] is False
    assert body["is_manual_override"] is False
    assert [entry["day"] for entry in body["opening_hours"]] == list(range(7))
    assert listing.json()["count"] == 1
    assert mine.json()["id"] == body["id"]
    assert public.status_code == 200


def test_opening_hours_validation(tmp_path: Path, monkeypatch) -> None:
    _setup_db(tmp_path, monkeypatch, "test_hours_validation.db")
    duplicate_days = [
        {"day": 1, "open_time": "09:00", "close_time": "12:00"},
        {"day": 1, "open_time": "13:00", "close_time": "22:00"},
    ]
    overnight = [{"day": 5, "open_time": "22:00", "close_time": "02:00"}]
    bad_format = [{"day": 2, "open_time": "9:00", "close_time": "22:00"}]
    bad_day = [{"day": 7, "open_time": "09:00", "close_time": "22:00"}]
    closed_day = [{"day": 0, "open_time": "00:00", "close_time": "00:00", "is_closed": True}]

    with TestClient(app) as client:
        headers = _owner_headers(client)
        responses = [
            client.post("/api/v1/restaurants", json={"name": "X", "opening_hours": hours}, headers=headers)
            for hours in (duplicate_days, overnight, bad_format, bad_day)
        ]
        accepted = client.post("/api/v1/restaurants", json={"name": "X", "opening_hours": closed_day}, headers=headers)

    assert [response.status_code for response in responses] == [422, 422, 422, 422]
    assert accepted.status_code == 201


def test_changing_is_open_sets_manual_override(tmp_path: Path, monkeypatch) -> None:
    testing_session_local = _setup_db(tmp_path, monkeypatch, "test_override_set.db")

    with TestClient(app) as client:
        headers = _owner_headers(client)
        restaurant = _create_restaurant(client, headers)
        same_value = client.put(f"/api/v1/restaurants/{restaurant['id']}", json={"is_open": False}, headers=headers)
        changed = client.put(f"/api/v1/restaurants/{restaurant['id']}", json={"is_open": True}, headers=headers)

    assert same_value.json()["is_manual_override"] is False
    assert changed.status_code == 200
    assert changed.json()["is_open"] is True
    assert changed.json()["is_manual_override"] is True
    with testing_session_local() as db:
        actions = db.scalars(select(AuditLog.action_type).where(AuditLog.restaurant_id == restaurant["id"])).all()
    assert actions == ["manual_override_set"]


def test_override_survives_ticks_until_reset(tmp_path: Path, monkeypatch) -> None:
    testing_session_local = _setup_db(tmp_path, monkeypatch, "test_override_reset.db")
    reconciler = Reconciler(store=SqlRestaurantStore(testing_session_local), clock=lambda: WEDNESDAY_NIGHT)

    with TestClient(app) as client:
        headers = _owner_headers(client)
        restaurant = _create_restaurant(client, headers)
        _activate(testing_session_local, restaurant["id"])
        client.put(f"/api/v1/restaurants/{restaurant['id']}", json={"is_open": True}, headers=headers)

        report = reconciler.tick(WEDNESDAY_NIGHT)
        after_tick = client.get(f"/api/v1/restaurants/{restaurant['id']}").json()

        reset = client.post(f"/api/v1/restaurants/{restaurant['id']}/reset-override", headers=headers)
        reset_report = reconciler.tick(WEDNESDAY_NIGHT)
        after_reset_tick = client.get(f"/api/v1/restaurants/{restaurant['id']}").json()

    assert report.skipped == 1
    assert report.errored == 0
    assert report.changed_ids == []
    assert after_tick["is_open"] is True
    assert reset.json()["is_manual_override"] is False
    assert reset.json()["is_open"] is True
    assert reset_report.changed_ids == [restaurant["id"]]
    assert after_reset_tick["is_open"] is False


def test_schedule_update_is_picked_up_by_next_tick(tmp_path: Path, monkeypatch) -> None:
    testing_session_local = _setup_db(tmp_path, monkeypatch, "test_schedule_update.db")
    reconciler = Reconciler(store=SqlRestaurantStore(testing_session_local), clock=lambda: WEDNESDAY_NOON)

    with TestClient(app) as client:
        headers = _owner_headers(client)
        restaurant = _create_restaurant(client, headers)
        _activate(testing_session_local, restaurant["id"])
        reconciler.tick(WEDNESDAY_NOON)
        opened = client.get(f"/api/v1/restaurants/{restaurant['id']}").json()

        wednesday_closed = [dict(entry, is_closed=entry["day"] == 3) for entry in WEEK]
        client.put(
            f"/api/v1/restaurants/{restaurant['id']}",
            json={"opening_hours": wednesday_closed},
            headers=headers,
        )
        reconciler.tick(WEDNESDAY_NOON)
        closed = client.get(f"/api/v1/restaurants/{restaurant['id']}").json()

    assert opened["is_open"] is True
    assert closed["is_open"] is False
    assert closed["is_manual_override"] is False


def test_submit_for_verification_requires_fssai(tmp_path: Path, monkeypatch) -> None:
    _setup_db(tmp_path, monkeypatch, "test_submit_verification.db")

    with TestClient(app) as client:
        headers = _owner_headers(client)
        without_license = _create_restaurant(client, headers, fssai_license_number=None)
        with_license = _create_restaurant(client, headers, name="Licensed")
        rejected = client.put(f"/api/v1/restaurants/{without_license['id']}/submit-verification", headers=headers)
        accepted = client.put(f"/api/v1/restaurants/{with_license['id']}/submit-verification", headers=headers)
        resubmitted = client.put(f"/api/v1/restaurants/{with_license['id']}/submit-verification", headers=headers)
        owner_activation = client.put(
            f"/api/v1/restaurants/{without_license['id']}",
            json={"status": "active"},
            headers=headers,
        )

    assert rejected.status_code == 400
    assert accepted.status_code == 200
    assert accepted.json()["status"] == "pending"
    assert resubmitted.status_code == 400
    assert owner_activation.status_code == 400


def test_admin_verification_decision(tmp_path: Path, monkeypatch) -> None:
    testing_session_local = _setup_db(tmp_path, monkeypatch, "test_admin_decision.db")

    with TestClient(app) as client:
        owner_headers = _owner_headers(client)
        admin_headers = _admin_headers(client, testing_session_local)
        restaurant = _create_restaurant(client, owner_headers)
        too_early = client.put(
            f"/api/v1/restaurants/{restaurant['id']}/status",
            json={"status": "active"},
            headers=admin_headers,
        )
        client.put(f"/api/v1/restaurants/{restaurant['id']}/submit-verification", headers=owner_headers)
        owner_attempt = client.put(
            f"/api/v1/restaurants/{restaurant['id']}/status",
            json={"status": "active"},
            headers=owner_headers,
        )
        approved = client.put(
            f"/api/v1/restaurants/{restaurant['id']}/status",
            json={"status": "active", "verification_notes": "Documents verified"},
            headers=admin_headers,
        )

    assert too_early.status_code == 400
    assert owner_attempt.status_code == 403
    assert approved.status_code == 200
    assert approved.json()["status"] == "active"
    assert approved.json()["verification_notes"] == "Documents verified"


def test_other_owners_cannot_touch_restaurant(tmp_path: Path, monkeypatch) -> None:
    _setup_db(tmp_path, monkeypatch, "test_ownership.db")

    with TestClient(app) as client:
        owner_headers = _owner_headers(client)
        intruder_headers = _owner_headers(client, email="intruder@example.com")
        restaurant = _create_restaurant(client, owner_headers)
        update = client.put(f"/api/v1/restaurants/{restaurant['id']}", json={"is_open": True}, headers=intruder_headers)
        reset = client.post(f"/api/v1/restaurants/{restaurant['id']}/reset-override", headers=intruder_headers)
        delete = client.delete(f"/api/v1/restaurants/{restaurant['id']}", headers=intruder_headers)
        anonymous = client.put(f"/api/v1/restaurants/{restaurant['id']}", json={"is_open": True})
        owner_delete = client.delete(f"/api/v1/restaurants/{restaurant['id']}", headers=owner_headers)
        after_delete = client.get(f"/api/v1/restaurants/{restaurant['id']}")

    assert update.status_code == 404
    assert reset.status_code == 404
    assert delete.status_code == 404
    assert anonymous.status_code in {401, 403}
    assert owner_delete.status_code == 204
    assert after_delete.status_code == 404


def test_health_endpoint(tmp_path: Path, monkeypatch) -> None:
    _setup_db(tmp_path, monkeypatch, "test_health.db")

    with TestClient(app) as client:
        response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "OK"
