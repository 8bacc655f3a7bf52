"""Error taxonomy of the ledger engine and its store adapter.

The HTTP layer maps each class to a status code (see ``finledger.main``);
nothing below knows about HTTP.
"""

from __future__ import annotations


class LedgerError(Exception):
    """Base class for every error raised by the ledger engine."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFound(LedgerError):
    status_code = 404

    @classmethod
    def for_entity(cls, entity: str, entity_id: int) -> "NotFound":
        return cls(f"{entity} {entity_id} not found")


class InvalidAccountType(LedgerError):
    status_code = 400


class MissingBillingConfig(LedgerError):
    status_code = 400


class InvalidBillingParameters(LedgerError, ValueError):
    status_code = 400


class UpstreamFailure(LedgerError):
    """The ledger store could not be read. The original error is chained."""

    status_code = 502


class DeadlineExceeded(LedgerError):
    status_code = 504
