"""Time limited nonces that do not depend on a logged in user."""

from __future__ import annotations

import hashlib
import hmac
import math
import secrets
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from fastapi import HTTPException, status

from ..core.config import SecuritySettings


@dataclass(slots=True)
class NonceManager:
    """Create and verify nonces valid for one ``lifetime``.

    The lifetime is split into two ticks: a nonce verifies with ``1`` during
    the tick it was created in and with ``2`` during the following tick.
    """

    secret: str
    lifetime: int = 60 * 60 * 24
    clock: Callable[[], float] = field(default=time.time, repr=False)

    @classmethod
    def from_settings(cls, settings: SecuritySettings) -> NonceManager:
        """Build a manager from application settings."""

        return cls(secret=settings.nonce_secret, lifetime=settings.nonce_lifetime)

    def tick(self) -> int:
        """Return the current half-lifetime counter."""

        return math.ceil(self.clock() / (self.lifetime / 2))

    def create_nonce(self, action: str | int = -1) -> str:
        """Return the nonce for ``action`` in the current tick."""

        return self._hash(self.tick(), action)

    def verify_nonce(self, nonce: str | None, action: str | int = -1) -> int:
        """Return ``1`` or ``2`` for the tick that produced ``nonce``, else ``0``."""

        if not nonce:
            return 0
        current = self.tick()
        if secrets.compare_digest(self._hash(current, action), nonce):
            return 1
        if secrets.compare_digest(self._hash(current - 1, action), nonce):
            return 2
        return 0

    def require_nonce(self, nonce: str | None, action: str | int = -1) -> int:
        """Verify ``nonce`` or reject the request with HTTP 403."""

        if not nonce:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Missing nonce.",
            )
        result = self.verify_nonce(nonce, action)
        if not result:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Invalid nonce.",
            )
        return result

    def _hash(self, tick: int, action: str | int) -> str:
        digest = hmac.new(
            self.secret.encode("utf-8"),
            f"{tick}{action}".encode("utf-8"),
            hashlib.sha256,
        ).hexdigest()
        return digest[-12:-2]


__all__ = ["NonceManager"]
