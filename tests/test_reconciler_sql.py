"""Reconciler against the SQLAlchemy-backed restaurant store."""

from datetime import datetime
from pathlib import Path

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from pickfoo.db.base import Base
from pickfoo.db.migrations import ensure_sqlite_schema
from pickfoo.models import Restaurant, RestaurantOpeningHours, User
from pickfoo.services.reconciler import Reconciler
from pickfoo.services.restaurant_service import SqlRestaurantStore

# 2025-01-08 is a Wednesday (day 3).
WEDNESDAY_NOON = datetime(2025, 1, 8, 12, 0)
WEDNESDAY_NIGHT = datetime(2025, 1, 8, 23, 30)


def _build_test_engine(db_file: Path) -> Engine:
    return create_engine(
        f"sqlite:///{db_file}",
        connect_args={"check_same_thread": False},
    )


def _seed(testing_session_local: sessionmaker) -> dict[str, int]:
    with testing_session_local() as db:
        owner = User(email="owner@example.com", name="Owner", password_hash="x", role="OWNER")
        db.add(owner)
        db.flush()

        def add_restaurant(name: str, **fields) -> Restaurant:
            restaurant = Restaurant(owner_id=owner.id, name=name, **fields)
            restaurant.opening_hours = [
                RestaurantOpeningHours(position=day, day=day, open_time="09:00", close_time="22:00")
                for day in range(7)
            ]
            db.add(restaurant)
            return restaurant

        scheduled = add_restaurant("Scheduled", status="active", is_open=False)
        overridden = add_restaurant("Overridden", status="active", is_open=False, is_manual_override=True)
        pending = add_restaurant("Pending", status="pending", is_open=False)
        broken = add_restaurant("Broken", status="active", is_open=False)
        broken.opening_hours[3].open_time = "9"
        db.commit()
        return {
            "scheduled": scheduled.id,
            "overridden": overridden.id,
            "pending": pending.id,
            "broken": broken.id,
        }


def _open_flags(testing_session_local: sessionmaker) -> dict[str, bool]:
    with testing_session_local() as db:
        return {row.name: row.is_open for row in db.query(Restaurant).all()}


def test_tick_updates_only_schedule_controlled_rows(tmp_path: Path) -> None:
    engine = _build_test_engine(tmp_path / "test_reconciler_sql.db")
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    ids = _seed(testing_session_local)

    reconciler = Reconciler(store=SqlRestaurantStore(testing_session_local), clock=lambda: WEDNESDAY_NOON)
    report = reconciler.tick(WEDNESDAY_NOON)

    assert report.changed_ids == [ids["scheduled"]]
    assert report.errored == 1
    assert [item.restaurant_id for item in report.outcomes if item.outcome == "errored"] == [ids["broken"]]
    assert report.skipped == 1
    assert [item.restaurant_id for item in report.outcomes if item.outcome == "skipped"] == [ids["overridden"]]
    assert _open_flags(testing_session_local) == {
        "Scheduled": True,
        "Overridden": False,
        "Pending": False,
        "Broken": False,
    }


def test_second_tick_at_same_instant_performs_no_writes(tmp_path: Path) -> None:
    engine = _build_test_engine(tmp_path / "test_reconciler_idempotent.db")
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    ids = _seed(testing_session_local)
    reconciler = Reconciler(store=SqlRestaurantStore(testing_session_local), clock=lambda: WEDNESDAY_NOON)

    reconciler.tick(WEDNESDAY_NOON)
    with testing_session_local() as db:
        updated_at = db.get(Restaurant, ids["scheduled"]).updated_at
    second = reconciler.tick(WEDNESDAY_NOON)

    assert second.changed_ids == []
    assert second.opened == 0
    assert second.closed == 0
    with testing_session_local() as db:
        assert db.get(Restaurant, ids["scheduled"]).updated_at == updated_at


def test_tick_closes_after_hours(tmp_path: Path) -> None:
    engine = _build_test_engine(tmp_path / "test_reconciler_close.db")
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    ids = _seed(testing_session_local)
    reconciler = Reconciler(store=SqlRestaurantStore(testing_session_local), clock=lambda: WEDNESDAY_NOON)

    reconciler.tick(WEDNESDAY_NOON)
    night = reconciler.tick(WEDNESDAY_NIGHT)

    assert night.changed_ids == [ids["scheduled"]]
    assert night.closed == 1
    assert _open_flags(testing_session_local)["Scheduled"] is False


def test_guarded_write_refuses_overridden_rows(tmp_path: Path) -> None:
    engine = _build_test_engine(tmp_path / "test_reconciler_guard.db")
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    ids = _seed(testing_session_local)
    store = SqlRestaurantStore(testing_session_local)

    assert store.set_open(ids["overridden"], True) is False
    assert store.set_open(ids["pending"], True) is False
    assert store.set_open(ids["scheduled"], True) is True
    assert store.set_open(ids["scheduled"], True) is False
    assert _open_flags(testing_session_local)["Overridden"] is False


def test_find_eligible_returns_schedule_in_stored_order(tmp_path: Path) -> None:
    engine = _build_test_engine(tmp_path / "test_reconciler_fetch.db")
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    ids = _seed(testing_session_local)

    eligible = SqlRestaurantStore(testing_session_local).find_eligible()

    assert [item.id for item in eligible] == [ids["scheduled"], ids["broken"]]
    assert [window.day for window in eligible[0].opening_hours] == list(range(7))


def test_sqlite_schema_patch_adds_availability_columns(tmp_path: Path) -> None:
    engine = _build_test_engine(tmp_path / "test_legacy_schema.db")
    with engine.begin() as connection:
        connection.execute(
            text("CREATE TABLE restaurants (id INTEGER PRIMARY KEY, owner_id INTEGER NOT NULL, name VARCHAR(255) NOT NULL)")
        )
        connection.execute(
            text(
                "CREATE TABLE restaurant_opening_hours (id INTEGER PRIMARY KEY, restaurant_id INTEGER NOT NULL, "
                "day INTEGER NOT NULL, open_time VARCHAR(5) NOT NULL, close_time VARCHAR(5) NOT NULL)"
            )
        )
        connection.execute(text("INSERT INTO restaurant_opening_hours (restaurant_id, day, open_time, close_time) VALUES (1, 3, '09:00', '22:00')"))

    ensure_sqlite_schema(engine)
    ensure_sqlite_schema(engine)

    with engine.connect() as connection:
        restaurant_columns = {row[1] for row in connection.execute(text("PRAGMA table_info(restaurants)"))}
        hours_columns = {row[1] for row in connection.execute(text("PRAGMA table_info(restaurant_opening_hours)"))}
        position = connection.execute(text("SELECT position FROM restaurant_opening_hours")).scalar_one()

    assert {"status", "is_open", "is_manual_override", "verification_notes"} <= restaurant_columns
    assert {"position", "is_closed"} <= hours_columns
    assert position == 1
