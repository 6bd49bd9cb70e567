"""Visitor address helpers."""

from __future__ import annotations

import ipaddress
import math
from collections.abc import Mapping

from starlette.requests import Request

UNKNOWN_IP = "0.0.0.0"

# Checked in order; proxy headers win over the socket address.
IP_HEADER_KEYS = (
    "HTTP_CF_CONNECTING_IP",
    "HTTP_CLIENT_IP",
    "HTTP_X_FORWARDED_FOR",
    "HTTP_X_FORWARDED",
    "HTTP_X_CLUSTER_CLIENT_IP",
    "HTTP_FORWARDED_FOR",
    "HTTP_FORWARDED",
    "REMOTE_ADDR",
)

# RFC 1918 only; loopback, link-local and reserved addresses are accepted.
PRIVATE_NETWORKS = (
    ipaddress.IPv4Network("10.0.0.0/8"),
    ipaddress.IPv4Network("172.16.0.0/12"),
    ipaddress.IPv4Network("192.168.0.0/16"),
)


def _is_public_ipv4(candidate: str) -> bool:
    try:
        address = ipaddress.IPv4Address(candidate)
    except ValueError:
        return False
    return not any(address in network for network in PRIVATE_NETWORKS)


def get_user_ip(environ: Mapping[str, str]) -> str:
    """Return the first public IPv4 address found in ``environ``.

    ``environ`` uses CGI style keys. Falls back to ``0.0.0.0``.
    """
    candidates: list[str] = []
    for key in IP_HEADER_KEYS:
        raw = environ.get(key)
        if raw is None:
            continue
        for part in raw.split(","):
            address = part.replace(" ", "")
            if address not in candidates:
                candidates.append(address)

    for candidate in candidates:
        if _is_public_ipv4(candidate):
            return candidate
    return UNKNOWN_IP


def request_user_ip(request: Request) -> str:
    """Apply :func:`get_user_ip` to a Starlette request."""
    environ: dict[str, str] = {}
    for key in IP_HEADER_KEYS[:-1]:
        header = key.removeprefix("HTTP_").replace("_", "-").lower()
        value = request.headers.get(header)
        if value is not None:
            environ[key] = value
    if request.client is not None:
        environ["REMOTE_ADDR"] = request.client.host
    return get_user_ip(environ)


def _as_number(text: str) -> int | None:
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return None
    return int(number) if math.isfinite(number) else None


def ip_to_long(value: str | int | float) -> str:
    """Return the unsigned decimal form of an IPv4 address or number.

    Numeric input is truncated to an integer and negative numbers wrap
    around to their unsigned 32 bit value; anything unparsable yields ``"0"``.
    """
    if isinstance(value, (int, float)):
        value = str(value)
    text = value.strip()
    number = _as_number(text)
    if number is None:
        try:
            number = int(ipaddress.IPv4Address(text))
        except ValueError:
            return "0"
    return str(number & 0xFFFFFFFF if number < 0 else number)


__all__ = [
    "IP_HEADER_KEYS",
    "PRIVATE_NETWORKS",
    "UNKNOWN_IP",
    "get_user_ip",
    "ip_to_long",
    "request_user_ip",
]
