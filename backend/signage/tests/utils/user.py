from fastapi.testclient import TestClient
from sqlmodel import Session

from signage import crud
from signage.core.config import settings
from signage.models.database import User
from signage.models.schemas.user import UserCreate
from signage.tests.utils.utils import random_email, random_lower_string


def user_authentication_headers(
    *, client: TestClient, email: str, password: str
) -> dict[str, str]:
    data = {"username": email, "password": password}

    r = client.post(f"{settings.API_V1_STR}/auth/login", data=data)
    response = r.json()
    auth_token = response["access_token"]
    headers = {"Authorization": f"Bearer {auth_token}"}
    return headers


def create_random_user(db: Session, password: str | None = None) -> User:
    user_in = UserCreate(email=random_email(), password=password or random_lower_string())
    return crud.create_user(session=db, user_create=user_in)


def operator_token_headers(*, client: TestClient, db: Session) -> dict[str, str]:
    """Create an operator and return headers carrying a valid token for them."""
    password = random_lower_string()
    user = create_random_user(db, password=password)
    return user_authentication_headers(client=client, email=user.email, password=password)
