import logging
from datetime import timedelta
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm

from signage import crud
from signage.api.deps import CurrentUser, SessionDep
from signage.core import security
from signage.core.config import settings
from signage.models.schemas.device import DeviceInfo, DeviceLogin
from signage.models.schemas.token import Token
from signage.models.schemas.user import (
    CurrentUserPublic,
    ProfilePublic,
    UserCreate,
    UserPublic,
    UserRegister,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login")
def login(
    session: SessionDep,
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
) -> Token:
    """
    OAuth2 compatible token login, get an access token for future requests.
    """
    user = crud.authenticate(
        session=session, email=form_data.username, password=form_data.password
    )
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
        )
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Inactive user",
        )

    access_token_expires = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    return Token(
        access_token=security.create_access_token(user.id, expires_delta=access_token_expires)
    )


@router.post("/signup", response_model=UserPublic)
def register_user(session: SessionDep, user_in: UserRegister) -> Any:
    """
    Create a new operator together with their profile username.
    """
    user = crud.get_user_by_email(session=session, email=user_in.email)
    if user:
        raise HTTPException(
            status_code=400,
            detail="The user with this email already exists in the system",
        )
    user_create = UserCreate.model_validate(user_in)
    user = crud.create_user(session=session, user_create=user_create)
    logger.info(f"Registered operator {user.email}")
    return user


@router.get("/me", response_model=CurrentUserPublic)
def read_user_me(session: SessionDep, current_user: CurrentUser) -> Any:
    """
    Get the signed-in operator and their profile, filling in a default username when missing.
    """
    if not current_user.username:
        current_user.username = f"user_{str(current_user.id)[:8]}"
        session.add(current_user)
        session.commit()
        session.refresh(current_user)
    return CurrentUserPublic(
        user=UserPublic.model_validate(current_user),
        profile=ProfilePublic.model_validate(current_user),
    )


@router.post("/device-login", response_model=DeviceInfo)
def device_login(session: SessionDep, login_in: DeviceLogin) -> Any:
    """
    Exchange a kiosk's 4-digit PIN for its device record.
    """
    device = crud.get_device_by_pin(session=session, pin=login_in.pin)
    if not device:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid PIN",
        )
    logger.info(f"Device {device.id} logged in with PIN")
    return device
