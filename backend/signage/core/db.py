import logging

from sqlmodel import Session, SQLModel, create_engine, select

from signage import crud
from signage.core.config import settings
from signage.models.database import User  # noqa: F401 registers all tables
from signage.models.schemas.user import UserCreate

logger = logging.getLogger(__name__)

connect_args = (
    {"check_same_thread": False}
    if settings.SQLALCHEMY_DATABASE_URI.startswith("sqlite")
    else {}
)
engine = create_engine(settings.SQLALCHEMY_DATABASE_URI, connect_args=connect_args)


def init_db(session: Session) -> None:
    """
    Create tables when they are missing and make sure the first operator exists.

    Production databases are managed with Alembic; create_all is a no-op there.
    """
    SQLModel.metadata.create_all(session.get_bind())

    user = session.exec(
        select(User).where(User.email == settings.FIRST_SUPERUSER)
    ).first()
    if not user:
        user_in = UserCreate(
            email=settings.FIRST_SUPERUSER,
            password=settings.FIRST_SUPERUSER_PASSWORD,
            is_superuser=True,
        )
        crud.create_user(session=session, user_create=user_in)
        logger.info(f"Created first superuser {settings.FIRST_SUPERUSER}")
