"""Domain errors raised by the ledger services.

Every error propagates to the direct caller; the HTTP layer maps each kind
to a distinct status code (see ``points_ledger.main``).
"""


class LedgerError(Exception):
    """Base class for all points ledger errors."""

    status_code = 400
    error_code = "ledger_error"

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ValidationError(LedgerError):
    """Malformed input: non-positive amount, blank reason, irreversible event."""

    status_code = 400
    error_code = "validation_error"


class PermissionDeniedError(LedgerError):
    """Rank hierarchy violated, or actor title is unknown."""

    status_code = 403
    error_code = "permission_denied"


class NotFoundError(LedgerError):
    """Missing or inactive employee, reward, or point event."""

    status_code = 404
    error_code = "not_found"


class ExpiredWindowError(LedgerError):
    """Undo attempted after the undo window closed."""

    status_code = 409
    error_code = "undo_window_expired"


class InsufficientBalanceError(LedgerError):
    """Redemption cost exceeds the live balance."""

    status_code = 409
    error_code = "insufficient_balance"


class ConflictError(LedgerError):
    """Lost a concurrency race more times than the retry budget allows."""

    status_code = 409
    error_code = "conflict"
