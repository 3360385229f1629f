"""FastAPI entrypoint for the restaurant owner backend."""

from __future__ import annotations

import logging
import time

from fastapi import FastAPI

from pickfoo.api.v1.api import api_router
from pickfoo.core.config import settings
from pickfoo.db import session as db_session
from pickfoo.db.base import Base
from pickfoo.db.migrations import ensure_sqlite_schema
from pickfoo.db.seed import ensure_admin_user
from pickfoo.services.reconciler import Reconciler
from pickfoo.services.restaurant_service import SqlRestaurantStore
from pickfoo.tasks.scheduler import ScheduleTicker
from pickfoo.utils.time import schedule_now

logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name, version="1.0.0")
app.include_router(api_router, prefix="/api/v1")
app.state.ticker = None
STARTED_AT = time.monotonic()


def configure_logging() -> None:
    """Emit ``pickfoo.*`` records at LOG_LEVEL without changing other loggers' levels."""
    logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger("pickfoo").setLevel(settings.log_level.upper())


def build_ticker() -> ScheduleTicker:
    """Wire the reconciler to the SQL store and the configured clock."""
    reconciler = Reconciler(store=SqlRestaurantStore(), clock=schedule_now)
    return ScheduleTicker(reconciler, interval=settings.scheduler_interval_seconds)


@app.on_event("startup")
def startup() -> None:
    configure_logging()
    Base.metadata.create_all(bind=db_session.engine)
    ensure_sqlite_schema(db_session.engine)
    with db_session.SessionLocal() as session:
        try:
            admin_present = ensure_admin_user(session)
            logger.info("[BOOTSTRAP] admin present: %s", "yes" if admin_present else "no")
        except Exception:
            logger.exception("[BOOTSTRAP] Admin seed failed; continuing startup.")

    if settings.scheduler_enabled:
        app.state.ticker = build_ticker()
        app.state.ticker.start()
    else:
        logger.info("[SCHEDULE] Restaurant scheduler disabled (SCHEDULER_ENABLED=0)")


@app.on_event("shutdown")
def shutdown() -> None:
    ticker: ScheduleTicker | None = app.state.ticker
    if ticker is not None:
        ticker.stop()
        app.state.ticker = None


@app.get("/health")
def health_check() -> dict[str, str | float]:
    return {"status": "OK", "uptime": round(time.monotonic() - STARTED_AT, 3)}
