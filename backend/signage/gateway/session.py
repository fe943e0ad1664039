"""
Explicit operator session: who is signed in, their profile and their token.

One AuthSession is built per controller and handed to whatever needs it; the
token it holds is pushed onto the gateway so later calls are authenticated.
"""
import logging
from typing import Optional

from signage.gateway.client import GatewayClient, GatewayError
from signage.models.schemas.user import ProfilePublic, UserPublic

logger = logging.getLogger(__name__)


class AuthSession:
    def __init__(self, gateway: GatewayClient):
        self.gateway = gateway
        self.user: Optional[UserPublic] = None
        self.profile: Optional[ProfilePublic] = None
        self.loading = False

    @property
    def token(self) -> Optional[str]:
        return self.gateway.token

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    async def sign_in(self, email: str, password: str) -> None:
        """
        Exchange credentials for a token and load the operator's profile.

        Raises:
            GatewayError: if the credentials are rejected or the backend is unreachable
        """
        token = await self.gateway.login(email, password)
        self.gateway.token = token.access_token
        await self.load_user()

    async def sign_up(self, email: str, password: str, username: str) -> UserPublic:
        """Create an operator account; the caller signs in afterwards."""
        return await self.gateway.sign_up(email, password, username)

    async def sign_out(self) -> None:
        self.gateway.token = None
        self.user = None
        self.profile = None

    async def load_user(self) -> None:
        """
        Refresh the current user and profile from the backend.

        A failed lookup leaves the session signed out rather than raising.
        """
        if not self.gateway.token:
            self.user = None
            self.profile = None
            return

        self.loading = True
        try:
            me = await self.gateway.read_me()
            self.user = me.user
            self.profile = me.profile
        except GatewayError as e:
            logger.error(f"Error loading user: {str(e)}")
            self.user = None
            self.profile = None
        finally:
            self.loading = False
