"""Model gateway access."""

from .gateway_client import GatewayClient, GatewayRequestError

__all__ = ["GatewayClient", "GatewayRequestError"]
