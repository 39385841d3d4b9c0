"""Application-layer exceptions. Do not reuse domain exceptions."""


class ApplicationError(Exception):
    """Base for all application-layer errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class RecordNotFoundError(ApplicationError):
    """Raised when an update or delete targets an id that does not resolve to a live record."""


class StaleRecordError(ApplicationError):
    """Raised when an update carries an expected version that no longer matches the stored record."""


class PersistenceError(ApplicationError):
    """
    Raised when any write, propagation or audit step fails. The unit of work has been
    rolled back; the underlying cause is chained and logged, never shown to the caller.
    """
