"""In-memory OTP manager with expiry, single-use redemption and a periodic sweep."""

from __future__ import annotations

import asyncio
import enum
import logging
import math
import secrets
import time
from collections.abc import Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_CODE_WIDTH = 6
DEFAULT_TTL_MINUTES = 10
SWEEP_INTERVAL_SECONDS = 300  # 5 minutes
SWEEP_TASK_NAME = "otp-sweep"


class OTPCheck(enum.Enum):
    """Outcome of checking a code against the store."""

    VALID = "valid"
    NOT_FOUND = "not_found"
    EXPIRED = "expired"
    MISMATCH = "mismatch"


@dataclass
class OTPRecord:
    code: str
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now > self.expires_at


def _normalize(identity: str) -> str:
    return identity.lower()


class OTPManager:
    """Issues, stores and redeems short-lived numeric codes.

    Each entry maps ``identity → OTPRecord``.  Identities are case-folded,
    and a later :meth:`store` for the same identity replaces the earlier
    record.  Expired entries are dropped lazily on :meth:`check` and
    eagerly by the background sweep started with :meth:`start`.
    """

    def __init__(
        self,
        code_width: int = DEFAULT_CODE_WIDTH,
        default_ttl_minutes: float = DEFAULT_TTL_MINUTES,
        sweep_interval_seconds: float = SWEEP_INTERVAL_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if code_width < 1:
            raise ValueError("code_width must be at least 1")
        self._store: dict[str, OTPRecord] = {}
        self._code_width = code_width
        self._default_ttl_minutes = default_ttl_minutes
        self._sweep_interval = sweep_interval_seconds
        self._clock = clock
        self._sweep_task: asyncio.Task | None = None

    def __len__(self) -> int:
        return len(self._store)

    # ── Codes ────────────────────────────────────────────

    def generate(self) -> str:
        """Return a zero-padded code drawn uniformly from ``[0, 10**width)``."""
        value = secrets.randbelow(10**self._code_width)
        return str(value).zfill(self._code_width)

    def store(self, identity: str, code: str, ttl_minutes: float | None = None) -> None:
        """Store *code* for *identity*, replacing any outstanding code."""
        if ttl_minutes is None:
            ttl_minutes = self._default_ttl_minutes
        key = _normalize(identity)
        self._store[key] = OTPRecord(
            code=code, expires_at=self._clock() + ttl_minutes * 60
        )
        logger.debug("OTP stored for %s (ttl %s min)", key, ttl_minutes)

    def check(self, identity: str, code: str) -> OTPCheck:
        """Check *code* for *identity* and consume it on a match."""
        key = _normalize(identity)
        record = self._store.get(key)
        if record is None:
            return OTPCheck.NOT_FOUND
        if record.is_expired(self._clock()):
            self._store.pop(key, None)
            logger.info("OTP expired for %s", key)
            return OTPCheck.EXPIRED
        if not secrets.compare_digest(record.code.encode("utf-8"), code.encode("utf-8")):
            return OTPCheck.MISMATCH
        # Single use
        self._store.pop(key, None)
        return OTPCheck.VALID

    def verify(self, identity: str, code: str) -> bool:
        """Return ``True`` if *code* matches the live code for *identity*."""
        return self.check(identity, code) is OTPCheck.VALID

    def remaining_seconds(self, identity: str) -> int:
        """Whole seconds until the code for *identity* expires, ``0`` if none."""
        record = self._store.get(_normalize(identity))
        if record is None:
            return 0
        return max(0, math.floor(record.expires_at - self._clock()))

    def clear(self, identity: str) -> None:
        """Drop any code for *identity*."""
        self._store.pop(_normalize(identity), None)

    def sweep(self) -> int:
        """Remove every expired record and return how many were removed."""
        now = self._clock()
        expired = [key for key, record in self._store.items() if record.is_expired(now)]
        for key in expired:
            del self._store[key]
        if expired:
            logger.info("OTP sweep removed %d expired code(s)", len(expired))
        return len(expired)

    # ── Lifecycle ────────────────────────────────────────

    def start(self) -> None:
        """Start the periodic sweep on the running event loop."""
        if self._sweep_task is not None and not self._sweep_task.done():
            return
        self._sweep_task = asyncio.get_running_loop().create_task(
            self._sweep_forever(), name=SWEEP_TASK_NAME
        )
        logger.info("OTP sweep started (every %ss)", self._sweep_interval)

    async def shutdown(self) -> None:
        """Cancel the periodic sweep and wait for it to stop."""
        task, self._sweep_task = self._sweep_task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("OTP sweep stopped")

    async def _sweep_forever(self) -> None:
        while True:
            await asyncio.sleep(self._sweep_interval)
            self.sweep()
