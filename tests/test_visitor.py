"""Tests for visitor address detection and URL checks."""

from __future__ import annotations

import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from avh_framework.network import get_user_ip, ip_to_long, request_user_ip
from avh_framework.support import is_valid_url


def test_first_public_ipv4_wins() -> None:
    """The first public IPv4 candidate is returned."""

    environ = {
        "HTTP_X_FORWARDED_FOR": "10.0.0.1, 8.8.8.8,1.1.1.1",
        "REMOTE_ADDR": "192.168.1.5",
    }

    assert get_user_ip(environ) == "8.8.8.8"


def test_header_order_takes_precedence() -> None:
    """Earlier header keys win over later ones."""

    environ = {
        "HTTP_X_FORWARDED_FOR": "8.8.8.8",
        "HTTP_CF_CONNECTING_IP": "1.1.1.1",
    }

    assert get_user_ip(environ) == "1.1.1.1"


@pytest.mark.parametrize(
    "environ",
    [
        {},
        {"REMOTE_ADDR": "192.168.1.5"},
        {"REMOTE_ADDR": "2001:4860:4860::8888"},
        {"HTTP_CLIENT_IP": "unknown"},
    ],
)
def test_no_public_ipv4_falls_back(environ: dict[str, str]) -> None:
    """Without a usable address the unknown address is returned."""

    assert get_user_ip(environ) == "0.0.0.0"


@pytest.mark.parametrize(
    "address",
    ["127.0.0.1", "169.254.1.1", "0.1.2.3", "172.32.0.1", "11.0.0.1"],
)
def test_only_rfc1918_ranges_are_private(address: str) -> None:
    """Loopback, link-local and reserved IPv4 addresses are accepted."""

    assert get_user_ip({"REMOTE_ADDR": address}) == address


@pytest.mark.parametrize("address", ["10.9.8.7", "172.16.0.1", "172.31.255.255"])
def test_rfc1918_ranges_are_skipped(address: str) -> None:
    """Private network addresses fall through to the next candidate."""

    environ = {"HTTP_CLIENT_IP": address, "REMOTE_ADDR": "127.0.0.1"}

    assert get_user_ip(environ) == "127.0.0.1"


def test_request_user_ip_reads_headers() -> None:
    """Request headers are mapped onto the CGI keys."""

    app = FastAPI()

    @app.get("/ip")
    def visitor_ip(request: Request) -> dict[str, str]:
        return {"ip": request_user_ip(request)}

    client = TestClient(app)

    forwarded = client.get("/ip", headers={"X-Forwarded-For": "10.1.1.1, 9.9.9.9"})
    direct = client.get("/ip")

    assert forwarded.json() == {"ip": "9.9.9.9"}
    assert direct.json() == {"ip": "0.0.0.0"}


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("192.168.255.109", "3232300909"),
        ("3232300909", "3232300909"),
        ("-1062666387", "3232300909"),
        (3232300909, "3232300909"),
        (-1062666387, "3232300909"),
        ("3.5", "3"),
        ("1e3", "1000"),
        (3.9, "3"),
        ("nan", "0"),
        ("0xC0A8FF6D", "0"),
        ("not an ip", "0"),
    ],
)
def test_ip_to_long(value: str | int | float, expected: str) -> None:
    """Addresses and numbers convert to unsigned decimal strings."""

    assert ip_to_long(value) == expected


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("#top", True),
        ("//cdn.example.com/app.js", True),
        ("mailto:someone@example.com", True),
        ("tel:+123456", True),
        ("https://example.com/page?x=1", True),
        ("example.com", False),
        ("/relative/path", False),
        ("http://exa mple.com", False),
    ],
)
def test_is_valid_url(path: str, expected: bool) -> None:
    """Only absolute URLs and the special prefixes are valid."""

    assert is_valid_url(path) is expected
