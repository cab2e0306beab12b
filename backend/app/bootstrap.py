from __future__ import annotations

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from app.auth import hash_password
from app.config import settings
from app.log import get_logger
from app.models.user import User


log = get_logger(__name__)


def ensure_default_admin(engine: Engine) -> User | None:
    """Create or promote the bootstrap admin named by DEFAULT_ADMIN_EMAIL."""
    email = settings.default_admin_email.strip().lower()
    if not email:
        return None

    with Session(bind=engine) as db:
        admin = db.query(User).filter(User.email == email).first()
        if admin is None:
            if not settings.default_admin_password:
                log.warning("DEFAULT_ADMIN_EMAIL is set without DEFAULT_ADMIN_PASSWORD, skipping admin bootstrap")
                return None
            admin = User(
                email=email,
                password_hash=hash_password(settings.default_admin_password),
                display_name="Administrator",
                is_admin=True,
                created_via="bootstrap",
            )
            db.add(admin)
            log.info("Created bootstrap admin %s", email)
        elif not admin.is_admin:
            admin.is_admin = True
            db.add(admin)
            log.info("Promoted %s to admin", email)
        db.commit()
        db.refresh(admin)
        db.expunge(admin)
        return admin
