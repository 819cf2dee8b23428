from __future__ import annotations

from enum import Enum

SESSION_EXPIRED_MESSAGE = "Your session has expired. Please sign in again."
GENERIC_FAILURE_MESSAGE = "Request failed."


class ErrorKind(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    NETWORK_OR_SERVER = "network_or_server"
    # Stored session could not be decoded. Logged, then treated as "no session".
    LOCAL_STATE_CORRUPT = "local_state_corrupt"


class NotekeepError(RuntimeError):
    pass


class ClassifiedError(NotekeepError):
    def __init__(self, kind: ErrorKind, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.status_code = status_code

    def __repr__(self) -> str:
        return f"ClassifiedError(kind={self.kind.value!r}, status_code={self.status_code!r}, message={self.message!r})"


class SessionExpiredError(NotekeepError):
    def __init__(self, message: str = SESSION_EXPIRED_MESSAGE) -> None:
        super().__init__(message)
        self.message = message
