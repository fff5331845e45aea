# backend/stockroom/core/errors.py

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class AuthError(str, Enum):
    # unknown username and wrong password share one kind (no username enumeration)
    INVALID_CREDENTIALS = "InvalidCredentials"
    USER_NOT_FOUND = "UserNotFound"
    USERNAME_TAKEN = "UsernameTaken"
    EMAIL_TAKEN = "EmailTaken"


ERROR_MESSAGES = {
    AuthError.INVALID_CREDENTIALS: "Invalid username or password",
    AuthError.USER_NOT_FOUND: "User not found",
    AuthError.USERNAME_TAKEN: "Username already exists",
    AuthError.EMAIL_TAKEN: "Email already exists",
}


@dataclass(frozen=True)
class AuthResult(Generic[T]):
    """Outcome of a Session Manager operation: a value or an AuthError, never both."""

    value: Optional[T] = None
    error: Optional[AuthError] = None

    @classmethod
    def success(cls, value: T) -> "AuthResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: AuthError) -> "AuthResult[T]":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def message(self) -> Optional[str]:
        return ERROR_MESSAGES[self.error] if self.error else None
