from __future__ import annotations

import logging
from typing import Callable, Generic, TypeVar

T = TypeVar("T")

logger = logging.getLogger("notekeep.signals")


class Signal(Generic[T]):
    """Synchronous in-process notification; receivers run in connection order."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._receivers: list[Callable[[T], None]] = []

    def connect(self, receiver: Callable[[T], None]) -> Callable[[], None]:
        self._receivers.append(receiver)

        def disconnect() -> None:
            self.disconnect(receiver)

        return disconnect

    def disconnect(self, receiver: Callable[[T], None]) -> None:
        try:
            self._receivers.remove(receiver)
        except ValueError:
            pass

    def emit(self, payload: T) -> None:
        for receiver in list(self._receivers):
            try:
                receiver(payload)
            except Exception:
                logger.exception("signal_receiver_error", extra={"signal": self.name})

    def __len__(self) -> int:
        return len(self._receivers)
