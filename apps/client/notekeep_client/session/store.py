from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Literal

from pydantic import ValidationError

from notekeep_client.domain.entities import Identity
from notekeep_client.domain.exceptions import ErrorKind
from notekeep_client.domain.ports import AuthGateway, KeyValueStore, StorageEvent
from notekeep_client.domain.schemas import StoredSessionRecord
from notekeep_client.signals import Signal

logger = logging.getLogger("notekeep.session")

DEFAULT_SESSION_KEY = "user"

AuthAction = Literal["login", "register", "logout"]


@dataclass(frozen=True)
class AuthChange:
    action: AuthAction
    identity: Identity | None


@dataclass(frozen=True)
class SessionDecode:
    identity: Identity | None
    corrupt: bool = False


def decode_session_record(raw: str | None) -> SessionDecode:
    """
    Decodes a stored Session Record.

    Absent, unauthenticated and corrupt records all yield no identity;
    `corrupt` tells the last case apart. Never raises.
    """
    if raw is None:
        return SessionDecode(identity=None)
    try:
        record = StoredSessionRecord.model_validate_json(raw)
    except ValidationError:
        logger.warning("session_record_corrupt", extra={"kind": ErrorKind.LOCAL_STATE_CORRUPT.value})
        return SessionDecode(identity=None, corrupt=True)
    if not record.email.strip():
        logger.warning("session_record_corrupt", extra={"kind": ErrorKind.LOCAL_STATE_CORRUPT.value})
        return SessionDecode(identity=None, corrupt=True)
    if not record.is_authenticated:
        return SessionDecode(identity=None)
    return SessionDecode(identity=record.to_identity())


def encode_session_record(identity: Identity) -> str:
    return StoredSessionRecord.from_identity(identity).model_dump_json(by_alias=True)


class SessionStore:
    """
    In-context mirror of the persisted Session Record.

    The mirror is refreshed from storage whenever either channel fires: the
    storage listener (writes made by other contexts) or `auth_events` (writes
    made by this context). Views subscribe to `session_changed`.
    """

    def __init__(
        self,
        storage: KeyValueStore,
        auth: AuthGateway,
        *,
        auth_events: Signal[AuthChange],
        key: str = DEFAULT_SESSION_KEY,
    ) -> None:
        self.storage = storage
        self.auth = auth
        self.auth_events = auth_events
        self.key = key
        self.session_changed: Signal[Identity | None] = Signal("session_changed")
        self._lock = threading.RLock()
        self._identity = decode_session_record(storage.get_item(key)).identity
        self._unsubscribe = [
            storage.add_listener(self._on_storage_event),
            auth_events.connect(self._on_auth_change),
        ]

    def login(self, email: str, password: str) -> Identity:
        identity = self.auth.login(email, password)
        self._persist(identity, "login")
        return identity

    def register(self, username: str, full_name: str, email: str, password: str) -> Identity:
        identity = self.auth.register(username, full_name, email, password)
        self._persist(identity, "register")
        return identity

    def logout(self) -> None:
        self.storage.remove_item(self.key)
        logger.info("session_logout", extra={"key": self.key})
        self.auth_events.emit(AuthChange(action="logout", identity=None))

    def current_identity(self) -> Identity | None:
        return self._identity

    def is_authenticated(self) -> bool:
        return self._identity is not None

    def refresh(self) -> Identity | None:
        with self._lock:
            self._apply(decode_session_record(self.storage.get_item(self.key)).identity)
            return self._identity

    def close(self) -> None:
        for unsubscribe in self._unsubscribe:
            unsubscribe()
        self._unsubscribe = []

    def _persist(self, identity: Identity, action: AuthAction) -> None:
        self.storage.set_item(self.key, encode_session_record(identity))
        logger.info("session_" + action, extra={"key": self.key, "identity": identity.id})
        self.auth_events.emit(AuthChange(action=action, identity=identity))

    def _on_storage_event(self, event: StorageEvent) -> None:
        if event.key != self.key:
            return
        self._apply(decode_session_record(event.new_value).identity)

    def _on_auth_change(self, change: AuthChange) -> None:
        self.refresh()

    def _apply(self, identity: Identity | None) -> None:
        # Storage events may arrive on the watchdog thread.
        with self._lock:
            if identity == self._identity:
                return
            self._identity = identity
            self.session_changed.emit(identity)
