"""Domain-specific exceptions. Pure domain layer: no infrastructure."""

from typing import Iterable


class DomainError(Exception):
    """Base for all domain-layer errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class DomainValidationError(DomainError):
    """
    Raised when one or more field or business rules are violated.
    Carries the complete list of violations, never just the first.
    """

    def __init__(self, errors: Iterable[str], message: str = "Validation failed") -> None:
        self.errors = list(errors)
        super().__init__(message)

    def __str__(self) -> str:
        return f"{self.message}: {'; '.join(self.errors)}"
