from signage.gateway.client import GatewayClient, GatewayError
from signage.gateway.session import AuthSession

__all__ = ["GatewayClient", "GatewayError", "AuthSession"]
