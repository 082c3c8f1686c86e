"""Credential Policy: registration input rules re-checked inside the core.

The API schemas enforce the same limits first; this guards callers that
reach AuthService without going through HTTP.
"""

from app.core.errors import CredentialPolicyError

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 100
PASSWORD_MIN_LENGTH = 6


def check_registration(name: str, password: str) -> None:
    """Raise CredentialPolicyError for out-of-policy name or password."""
    if not isinstance(name, str) or not (
        NAME_MIN_LENGTH <= len(name) <= NAME_MAX_LENGTH
    ):
        raise CredentialPolicyError(
            f"Name must be {NAME_MIN_LENGTH}-{NAME_MAX_LENGTH} characters", "name",
        )
    if not isinstance(password, str) or len(password) < PASSWORD_MIN_LENGTH:
        raise CredentialPolicyError(
            f"Password must be at least {PASSWORD_MIN_LENGTH} characters", "password",
        )
