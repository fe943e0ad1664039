import uuid
from datetime import datetime
from typing import List, Optional
from pydantic import EmailStr
from sqlmodel import Field, SQLModel


class UserBase(SQLModel):
    """Base schema for operator data"""
    email: EmailStr = Field(max_length=255)
    is_active: bool = True
    is_superuser: bool = False
    username: Optional[str] = Field(default=None, max_length=255)
    full_name: Optional[str] = Field(default=None, max_length=255)


class UserCreate(UserBase):
    """Schema for creating an operator"""
    password: str = Field(min_length=8, max_length=40)


class UserRegister(SQLModel):
    """Schema for the public sign-up form"""
    email: EmailStr = Field(max_length=255)
    password: str = Field(min_length=8, max_length=40)
    username: str = Field(min_length=1, max_length=255)


class UserPublic(UserBase):
    """Schema for public operator data"""
    id: uuid.UUID
    created_at: datetime


class ProfilePublic(SQLModel):
    """Profile view of an operator"""
    id: uuid.UUID
    username: Optional[str] = None
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: datetime


class CurrentUserPublic(SQLModel):
    """The signed-in operator together with their profile"""
    user: UserPublic
    profile: ProfilePublic


class UsersPublic(SQLModel):
    data: List[UserPublic]
    count: int
