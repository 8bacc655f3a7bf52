from __future__ import annotations

import time
from typing import Optional

from ..core.errors import DeadlineExceeded


class Deadline:
    """Caller-supplied time budget / cancellation signal for ledger reads.

    The engine calls :meth:`check` right before every store read, so an
    expired or cancelled deadline stops a derivation between queries.
    """

    def __init__(self, expires_at: Optional[float] = None) -> None:
        self._expires_at = expires_at
        self._cancelled = False

    @classmethod
    def after(cls, seconds: float) -> "Deadline":
        return cls(time.monotonic() + seconds)

    @classmethod
    def never(cls) -> "Deadline":
        return cls(None)

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def remaining(self) -> Optional[float]:
        if self._expires_at is None:
            return None
        return max(0.0, self._expires_at - time.monotonic())

    def expired(self) -> bool:
        if self._cancelled:
            return True
        return self._expires_at is not None and time.monotonic() >= self._expires_at

    def check(self, operation: str = "ledger read") -> None:
        if self._cancelled:
            raise DeadlineExceeded(f"{operation} cancelled by caller")
        if self._expires_at is not None and time.monotonic() >= self._expires_at:
            raise DeadlineExceeded(f"deadline exceeded before {operation}")


def check_deadline(deadline: Optional[Deadline], operation: str) -> None:
    if deadline is not None:
        deadline.check(operation)
