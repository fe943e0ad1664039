from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from signage.api.deps import get_db
from signage.core.storage import MediaStorage, get_media_storage
from signage.main import app
from signage.models import database  # noqa: F401 registers all tables


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db(engine) -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session


@pytest.fixture
def storage(tmp_path) -> MediaStorage:
    return MediaStorage(tmp_path / "media", "/media")


@pytest.fixture
def client(engine, storage) -> Generator[TestClient, None, None]:
    def get_db_override():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_db] = get_db_override
    app.dependency_overrides[get_media_storage] = lambda: storage
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def operator_headers(client, db) -> dict[str, str]:
    from signage.tests.utils.user import operator_token_headers

    return operator_token_headers(client=client, db=db)
