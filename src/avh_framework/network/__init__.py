"""Request related helpers."""

from .security import NonceManager
from .visitor import get_user_ip, ip_to_long, request_user_ip

__all__ = ["NonceManager", "get_user_ip", "ip_to_long", "request_user_ip"]
