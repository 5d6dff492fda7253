from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from devflow.database.session import SessionLocal
from devflow.models import User
from devflow.auth.auth_utils import hash_password
from devflow.config.settings import settings
from devflow.enums import UserRole
from devflow.utils.logger import get_logger

logger = get_logger(__name__)

def create_default_admin():
    """
    Checks for the configured admin account and creates it if missing.
    Uses credentials from settings; does nothing when they are not set.
    """
    if not settings.ADMIN_EMAIL or not settings.ADMIN_PASSWORD:
        logger.info("ADMIN_EMAIL/ADMIN_PASSWORD not set, skipping default admin")
        return

    db: Session = SessionLocal()
    try:
        admin = db.query(User).filter(User.email == settings.ADMIN_EMAIL).first()
        if not admin:
            logger.info("Creating default admin account...")
            admin_user = User(
                name=settings.ADMIN_NAME,
                email=settings.ADMIN_EMAIL,
                hashed_password=hash_password(settings.ADMIN_PASSWORD),
                role=UserRole.ADMIN.value
            )
            db.add(admin_user)
            db.commit()
            logger.info("Default admin user created")
        else:
            logger.info("Admin user already exists")
    finally:
        db.close()

def check_database_health() -> bool:
    """
    Runs a trivial query to confirm the database is reachable.
    """
    db: Session = SessionLocal()
    try:
        db.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}")
        return False
    finally:
        db.close()
