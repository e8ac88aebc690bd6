"""Service layer exceptions mapped to HTTP errors by the API routes."""


class RecordNotFoundError(LookupError):
    """Requested record, or the record a foreign key points at, does not exist."""


class DuplicateRecordError(ValueError):
    """A record with the same unique value already exists."""


class InvalidOperationError(ValueError):
    """Request is well-formed but not allowed in the record's current state."""
