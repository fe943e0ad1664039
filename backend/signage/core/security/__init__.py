"""
Security-related modules for the application.
"""

from signage.core.security.tokens import (
    ALGORITHM,
    create_access_token,
)
from signage.core.security.password import (
    get_password_hash,
    verify_password,
)

__all__ = [
    "ALGORITHM",
    "create_access_token",
    "get_password_hash",
    "verify_password",
]
