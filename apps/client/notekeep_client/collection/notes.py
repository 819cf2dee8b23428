from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Callable, Iterable

from notekeep_client.collection.caller import session_aware
from notekeep_client.collection.view_model import deletion_message, derive_view
from notekeep_client.domain.entities import CollectionView, Identity, Note
from notekeep_client.domain.ports import NoteGateway
from notekeep_client.session.store import SessionStore
from notekeep_client.signals import Signal
from notekeep_client.util import utc_now

logger = logging.getLogger("notekeep.collection")

NoteChange = Callable[[tuple[Note, ...]], Iterable[Note]]


class NoteCollection:
    """
    Client-side cache of the signed-in user's notes.

    The cache only changes from what the server returned; a failed call leaves
    it untouched. Every change re-derives order and stats and emits
    `collection_changed`.

    Session changes can arrive on another thread. A result is only applied if
    the cache was not cleared while its request was in flight, so a signed-out
    context never picks up the previous user's notes.
    """

    def __init__(
        self,
        gateway: NoteGateway,
        session: SessionStore,
        *,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.gateway = gateway
        self.session = session
        self.collection_changed: Signal[CollectionView] = Signal("collection_changed")
        self._clock = clock
        self._lock = threading.RLock()
        self._notes: tuple[Note, ...] = ()
        self._generation = 0
        self._owner = session.current_identity()
        self._closed = False
        self._disconnect = session.session_changed.connect(self._on_session_changed)

    @property
    def notes(self) -> tuple[Note, ...]:
        return self._notes

    def view(self) -> CollectionView:
        return derive_view(self._notes, now=self._clock())

    def find(self, note_id: str) -> Note | None:
        for note in self._notes:
            if note.id == note_id:
                return note
        return None

    @session_aware
    def load(self) -> CollectionView:
        generation = self._generation
        notes = self.gateway.list_notes()
        logger.info("notes_loaded", extra={"count": len(notes)})
        return self._commit(generation, lambda _: notes)

    @session_aware
    def create(self, title: str, content: str) -> Note:
        generation = self._generation
        note = self.gateway.create_note(title, content)
        logger.info("note_created", extra={"id": note.id})
        # Prepend, then re-derive: the server's timestamps decide the position.
        self._commit(generation, lambda current: (note, *current))
        return note

    @session_aware
    def get(self, note_id: str) -> Note:
        generation = self._generation
        note = self.gateway.get_note(note_id)
        with self._lock:
            if self.find(note.id) is not None:
                self._commit(generation, lambda current: _swap(current, note))
        return note

    @session_aware
    def update(self, note_id: str, title: str, content: str) -> Note:
        generation = self._generation
        note = self.gateway.update_note(note_id, title, content)
        logger.info("note_updated", extra={"id": note.id})

        def change(current: tuple[Note, ...]) -> Iterable[Note]:
            if any(n.id == note.id for n in current):
                return _swap(current, note)
            return (note, *current)

        self._commit(generation, change)
        return note

    @session_aware
    def delete(self, note_id: str) -> str:
        generation = self._generation
        existing = self.find(note_id)
        self.gateway.delete_note(note_id)
        logger.info("note_deleted", extra={"id": note_id})
        self._commit(generation, lambda current: tuple(n for n in current if n.id != note_id))
        return deletion_message(existing.title if existing is not None else None)

    def clear(self) -> None:
        with self._lock:
            # Requests already in flight must not repopulate the cache.
            self._generation += 1
            if not self._notes:
                return
            self._store(derive_view((), now=self._clock()))

    def close(self) -> None:
        with self._lock:
            self._closed = True
        self._disconnect()

    def _commit(self, generation: int, change: NoteChange) -> CollectionView:
        with self._lock:
            view = derive_view(change(self._notes), now=self._clock())
            if self._closed or generation != self._generation:
                logger.info("notes_result_discarded", extra={"closed": self._closed})
                return view
            self._store(view)
            return view

    def _store(self, view: CollectionView) -> None:
        self._notes = view.notes
        self.collection_changed.emit(view)

    def _on_session_changed(self, identity: Identity | None) -> None:
        with self._lock:
            if identity == self._owner:
                return
            self._owner = identity
            self.clear()


def _swap(notes: tuple[Note, ...], note: Note) -> tuple[Note, ...]:
    return tuple(note if n.id == note.id else n for n in notes)
