from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Protocol, runtime_checkable

from notekeep_client.domain.entities import Identity, Note


@dataclass(frozen=True)
class StorageEvent:
    key: str
    old_value: str | None
    new_value: str | None


StorageListener = Callable[[StorageEvent], None]


@runtime_checkable
class KeyValueStore(Protocol):
    """
    Durable string store shared by every context.

    Listeners only hear about changes made through *other* handles.
    """

    def get_item(self, key: str) -> str | None:
        ...

    def set_item(self, key: str, value: str) -> None:
        ...

    def remove_item(self, key: str) -> None:
        ...

    def add_listener(self, listener: StorageListener) -> Callable[[], None]:
        ...

    def close(self) -> None:
        ...


@runtime_checkable
class NoteGateway(Protocol):
    def list_notes(self) -> list[Note]:
        ...

    def create_note(self, title: str, content: str) -> Note:
        ...

    def get_note(self, note_id: str) -> Note:
        ...

    def update_note(self, note_id: str, title: str, content: str) -> Note:
        ...

    def delete_note(self, note_id: str) -> None:
        ...


@runtime_checkable
class AuthGateway(Protocol):
    def login(self, email: str, password: str) -> Identity:
        ...

    def register(self, username: str, full_name: str, email: str, password: str) -> Identity:
        ...
