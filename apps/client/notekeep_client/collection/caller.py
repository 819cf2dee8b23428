from __future__ import annotations

import functools
import logging
from typing import Callable, Protocol, TypeVar

from notekeep_client.domain.exceptions import ClassifiedError, ErrorKind, SessionExpiredError
from notekeep_client.session.store import SessionStore

logger = logging.getLogger("notekeep.collection")

R = TypeVar("R")


class SessionBound(Protocol):
    session: SessionStore

    def clear(self) -> None:
        ...


def session_aware(method: Callable[..., R]) -> Callable[..., R]:
    """
    Wraps a collection operation so an Unauthenticated failure tears the
    session down, clears the cached notes and surfaces `SessionExpiredError`.

    Every other `ClassifiedError` propagates untouched.
    """

    @functools.wraps(method)
    def wrapper(self: SessionBound, *args, **kwargs) -> R:
        try:
            return method(self, *args, **kwargs)
        except ClassifiedError as e:
            if e.kind is not ErrorKind.UNAUTHENTICATED:
                raise
            logger.warning("session_expired", extra={"operation": method.__name__, "status": e.status_code})
            self.session.logout()
            self.clear()
            raise SessionExpiredError() from e

    return wrapper
