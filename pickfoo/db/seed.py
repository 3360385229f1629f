"""Database seeding helpers."""

import logging

from sqlalchemy.orm import Session

from pickfoo.core.config import settings
from pickfoo.core.security import get_password_hash
from pickfoo.services.user_service import create_user, get_user_by_email

logger = logging.getLogger(__name__)


def ensure_admin_user(session: Session) -> bool:
    """Ensure the configured admin account exists; returns True when one is present."""
    if not settings.admin_email or not settings.admin_password:
        logger.info("[BOOTSTRAP] ADMIN_EMAIL/ADMIN_PASSWORD not set; skipping admin seed.")
        return False

    existing_user = get_user_by_email(db=session, email=settings.admin_email)
    if existing_user is not None:
        if existing_user.role != "ADMIN":
            logger.warning("[BOOTSTRAP] %s exists but is not an admin; leaving it unchanged.", settings.admin_email)
            return False
        return True

    create_user(
        db=session,
        email=settings.admin_email,
        hashed_password=get_password_hash(settings.admin_password),
        role="ADMIN",
        name="Administrator",
    )
    logger.info("[BOOTSTRAP] Admin account created for %s", settings.admin_email)
    return True
