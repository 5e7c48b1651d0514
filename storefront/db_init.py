import logging
import time
from pathlib import Path

from sqlalchemy import text
from sqlalchemy.exc import OperationalError

from storefront.config import settings
from storefront.models.database import Base, _normalize_database_url, engine
from storefront.models import (  # noqa: F401 - register models
    CartItem,
    Order,
    OrderItem,
    Payment,
    PaymentItem,
    Product,
    User,
)
from storefront.models.user import ROLE_ADMIN

logger = logging.getLogger(__name__)


def wait_for_db(retries: int, retry_delay_seconds: int) -> None:
    """Wait for database to accept connections before running migrations."""
    last_error = None
    for attempt in range(1, retries + 1):
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            logger.info("Database connection established on attempt %s", attempt)
            return
        except OperationalError as exc:
            last_error = exc
            logger.warning(
                "Database not reachable yet (attempt %s/%s): %s",
                attempt,
                retries,
                exc,
            )
            if attempt < retries:
                time.sleep(retry_delay_seconds)

    raise RuntimeError(
        "Database is unreachable after "
        f"{retries} attempts. Check DATABASE_URL and ensure the DB server is running."
    ) from last_error


def init_db():
    wait_for_db(
        retries=settings.DB_CONNECT_RETRIES,
        retry_delay_seconds=settings.DB_CONNECT_RETRY_DELAY_SECONDS,
    )
    if settings.DATABASE_URL.startswith("sqlite://"):
        Base.metadata.create_all(bind=engine)
        return

    # The schema is owned by Alembic; a mismatch fails here instead of at request time.
    run_migrations()


def run_migrations() -> None:
    """Apply Alembic migrations to the latest revision."""
    from alembic import command
    from alembic.config import Config

    project_root = Path(__file__).resolve().parent.parent
    alembic_ini = project_root / "alembic.ini"
    script_location = project_root / "alembic"
    if not alembic_ini.exists() or not script_location.exists():
        raise RuntimeError("Alembic configuration is missing (alembic.ini or alembic/ directory not found).")

    config = Config(str(alembic_ini))
    config.set_main_option("script_location", str(script_location))
    config.set_main_option("sqlalchemy.url", _normalize_database_url(settings.DATABASE_URL))
    command.upgrade(config, "head")


def seed_admin(db_session) -> User | None:
    """Create the administrator account from ADMIN_EMAIL / ADMIN_PASSWORD if it does not exist."""
    if not settings.ADMIN_EMAIL or not settings.ADMIN_PASSWORD:
        return None
    existing = db_session.query(User).filter(User.email == settings.ADMIN_EMAIL).first()
    if existing:
        return existing

    from storefront.api.auth import get_password_hash

    admin = User(
        email=settings.ADMIN_EMAIL,
        display_name="Administrator",
        hashed_password=get_password_hash(settings.ADMIN_PASSWORD),
        role=ROLE_ADMIN,
    )
    db_session.add(admin)
    db_session.commit()
    logger.info("Seeded administrator account %s", settings.ADMIN_EMAIL)
    return admin
