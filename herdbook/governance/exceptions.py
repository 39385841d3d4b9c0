"""Governance-layer exceptions. Typed, no HTTP."""


class GovernanceError(Exception):
    """Base for all governance-layer errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class AuditError(GovernanceError):
    """Raised when an audit entry cannot be written. Fatal to the mutation it documents."""
