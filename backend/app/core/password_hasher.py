"""Password Hasher: bcrypt one-way credential transform.

Invariants:
    - hash() output is salted per call; the same plaintext never hashes twice the same
    - verify() relies on bcrypt's constant-time comparison
    - verify() never raises for a malformed digest: it is a mismatch

Design Decisions:
    - passlib CryptContext over calling bcrypt directly: the scheme and cost live
      in one place and old digests keep verifying if the cost changes
    - Cost factor injected from settings; tests run at the bcrypt minimum (4)
"""

from passlib.context import CryptContext

from app.core.errors import CredentialPolicyError

DEFAULT_ROUNDS = 10

# Plaintext is irrelevant, only the cost of checking against it matters.
_DUMMY_PLAINTEXT = "timing-equalizer-not-a-password"


class PasswordHasher:
    """Hash and verify passwords with bcrypt."""

    def __init__(self, rounds: int = DEFAULT_ROUNDS):
        self._context = CryptContext(
            schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds,
        )
        self._dummy_digest = self._context.hash(_DUMMY_PLAINTEXT)

    def hash(self, plaintext: str) -> str:
        try:
            return self._context.hash(plaintext)
        except ValueError as e:
            # passlib raises PasswordValueError (a ValueError) for input bcrypt refuses
            raise CredentialPolicyError(
                "Password contains unsupported characters", "password",
            ) from e

    def verify(self, digest: str, plaintext: str) -> bool:
        try:
            return self._context.verify(plaintext, digest)
        except ValueError:
            return False

    def verify_dummy(self, plaintext: str) -> bool:
        """Pay the cost of a real verification when there is no digest to check."""
        self.verify(self._dummy_digest, plaintext)
        return False
