from __future__ import annotations

from datetime import datetime
from typing import Callable

import httpx

from notekeep_client.collection.notes import NoteCollection
from notekeep_client.domain.ports import AuthGateway, KeyValueStore, NoteGateway
from notekeep_client.remote.gateway import HttpAuthGateway, HttpNoteGateway
from notekeep_client.session.store import DEFAULT_SESSION_KEY, AuthChange, SessionStore
from notekeep_client.signals import Signal
from notekeep_client.util import utc_now


class ClientContext:
    """
    One independent client, the counterpart of a browser tab.

    Contexts share nothing but the durable storage. Each has its own storage
    handle, session mirror, note cache and same-context `auth_events` channel.
    """

    def __init__(
        self,
        *,
        storage: KeyValueStore,
        auth_gateway: AuthGateway,
        note_gateway: NoteGateway,
        session_key: str = DEFAULT_SESSION_KEY,
        clock: Callable[[], datetime] = utc_now,
        http_client: httpx.Client | None = None,
    ) -> None:
        self.storage = storage
        self.http_client = http_client
        self.auth_events: Signal[AuthChange] = Signal("auth_change")
        self.session = SessionStore(storage, auth_gateway, auth_events=self.auth_events, key=session_key)
        self.notes = NoteCollection(note_gateway, self.session, clock=clock)

    @classmethod
    def over_http(
        cls,
        *,
        storage: KeyValueStore,
        http_client: httpx.Client,
        session_key: str = DEFAULT_SESSION_KEY,
        clock: Callable[[], datetime] = utc_now,
    ) -> "ClientContext":
        return cls(
            storage=storage,
            auth_gateway=HttpAuthGateway(http_client),
            note_gateway=HttpNoteGateway(http_client),
            session_key=session_key,
            clock=clock,
            http_client=http_client,
        )

    def close(self) -> None:
        self.notes.close()
        self.session.close()
        self.storage.close()
        if self.http_client is not None:
            self.http_client.close()
