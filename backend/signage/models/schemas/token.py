from typing import Optional
from sqlmodel import SQLModel


class Token(SQLModel):
    """JSON payload containing access token"""
    access_token: str
    token_type: str = "bearer"


class TokenPayload(SQLModel):
    """Contents of JWT token"""
    sub: Optional[str] = None
