"""Security-layer exceptions. Typed, no HTTP."""


class SecurityError(Exception):
    """Base for all security-layer errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class AuthorizationError(SecurityError):
    """Raised when there is no actor, or the actor's role is not permitted for the operation."""


class PasswordHashingError(SecurityError):
    """Raised when a password cannot be hashed or a stored hash is malformed."""
