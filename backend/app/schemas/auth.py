"""Auth Schemas: registration/login payloads and the public user view.

Invariants:
    - RegisterRequest: name 2-100 chars, syntactically valid email, password >= 6 chars
    - Email is checked, never rewritten: the stored address is byte-for-byte what
      the caller sent, so lookups stay exact and case-sensitive
    - No response schema carries a password or hash
"""

from typing import Annotated
from uuid import UUID

from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator, BaseModel, Field

from app.core.credential_policy import (
    NAME_MAX_LENGTH, NAME_MIN_LENGTH, PASSWORD_MIN_LENGTH,
)
from app.core.records import AuthResult, PublicUser


def _check_email_syntax(value: str) -> str:
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError as e:
        raise ValueError(f"value is not a valid email address: {e}") from e
    return value


RawEmail = Annotated[str, AfterValidator(_check_email_syntax)]


class RegisterRequest(BaseModel):
    name: str = Field(min_length=NAME_MIN_LENGTH, max_length=NAME_MAX_LENGTH)
    email: RawEmail
    password: str = Field(min_length=PASSWORD_MIN_LENGTH)


class LoginRequest(BaseModel):
    email: RawEmail
    password: str = Field(min_length=1)


class UserResponse(BaseModel):
    id: UUID
    name: str
    email: str

    @classmethod
    def from_public(cls, user: PublicUser) -> "UserResponse":
        return cls(id=user.id, name=user.name, email=user.email)


class AuthResponse(BaseModel):
    user: UserResponse
    token: str

    @classmethod
    def from_result(cls, result: AuthResult) -> "AuthResponse":
        return cls(user=UserResponse.from_public(result.user), token=result.token)
