"""
Remote backends for a round
"""

from .base import ErrorKind, GatewayResult, NetworkGateway
from .factory import create_gateway, create_http_gateway, create_simulated_gateway
from .http_gateway import HttpGateway
from .simulated import SimulatedGateway
from .tokens import TokenStore

__all__ = [
    "ErrorKind",
    "GatewayResult",
    "NetworkGateway",
    "HttpGateway",
    "SimulatedGateway",
    "TokenStore",
    "create_gateway",
    "create_http_gateway",
    "create_simulated_gateway",
]
