"""PBKDF2 password hashing for worker login accounts. No global state."""

import base64
import hmac
import os

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from herdbook.security.exceptions import PasswordHashingError

ALGORITHM = "pbkdf2_sha256"
ITERATIONS = 480000
SALT_BYTES = 16
KEY_LENGTH = 32


def _derive(password: str, salt: bytes, iterations: int) -> bytes:
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=KEY_LENGTH,
        salt=salt,
        iterations=iterations,
    )
    return kdf.derive(password.encode("utf-8"))


class PasswordHasher:
    """Produces self-describing hashes: ``pbkdf2_sha256$<iterations>$<salt>$<digest>``."""

    def __init__(self, iterations: int = ITERATIONS) -> None:
        self._iterations = iterations

    def hash(self, password: str) -> str:
        if not password:
            raise PasswordHashingError("Password must not be empty")
        salt = os.urandom(SALT_BYTES)
        digest = _derive(password, salt, self._iterations)
        return "$".join(
            [
                ALGORITHM,
                str(self._iterations),
                base64.urlsafe_b64encode(salt).decode("ascii"),
                base64.urlsafe_b64encode(digest).decode("ascii"),
            ]
        )

    def verify(self, password: str, encoded: str) -> bool:
        """Constant-time check of password against a stored hash."""
        try:
            algorithm, iterations, salt, digest = encoded.split("$")
            if algorithm != ALGORITHM:
                raise ValueError(algorithm)
            expected = base64.urlsafe_b64decode(digest.encode("ascii"))
            actual = _derive(password, base64.urlsafe_b64decode(salt.encode("ascii")), int(iterations))
        except ValueError as e:
            raise PasswordHashingError("Stored password hash is malformed") from e
        return hmac.compare_digest(expected, actual)
