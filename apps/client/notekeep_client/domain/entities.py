from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Identity:
    id: str
    email: str
    username: str | None = None
    full_name: str | None = None


@dataclass(frozen=True)
class NoteOwner:
    id: str | None
    username: str | None
    full_name: str | None
    email: str | None


@dataclass(frozen=True)
class Note:
    id: str
    title: str
    content: str
    created_at: str | None
    updated_at: str | None
    owner: NoteOwner | None = None


@dataclass(frozen=True)
class NoteStats:
    total: int
    this_week: int
    last_activity_label: str
    last_activity_exact: str | None


@dataclass(frozen=True)
class CollectionView:
    notes: tuple[Note, ...]
    stats: NoteStats
