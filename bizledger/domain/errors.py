"""Domain errors raised by the ledger and surfaced unchanged to callers."""


class LedgerError(Exception):
    """Base exception for ledger operations."""

    pass


class ValidationError(LedgerError):
    """Input rejected before anything was persisted."""

    pass


class NotFoundError(LedgerError):
    """Record does not exist or belongs to another owner."""

    pass


class UnauthenticatedError(LedgerError):
    """No resolved owner for the call."""

    pass


class MonthAlreadyClosedError(ValidationError):
    """The period already has a history record for this owner."""

    pass
