from __future__ import annotations

from datetime import datetime, timedelta
from typing import Iterable

from notekeep_client.domain.entities import CollectionView, Note, NoteStats
from notekeep_client.util import epoch_seconds, parse_timestamp, utc_now

NO_ACTIVITY_LABEL = "No activity yet"
JUST_NOW_LABEL = "Just now"
UNTITLED_NOTE_LABEL = "Untitled note"
RECENT_WINDOW = timedelta(days=7)


def latest_activity(note: Note) -> datetime | None:
    updated = parse_timestamp(note.updated_at)
    created = parse_timestamp(note.created_at)
    if updated is not None and created is not None:
        return max(updated, created)
    return updated or created


def derive_order(notes: Iterable[Note]) -> tuple[Note, ...]:
    # sorted() stays stable with reverse=True; missing timestamps count as epoch 0.
    return tuple(sorted(notes, key=lambda n: epoch_seconds(latest_activity(n)), reverse=True))


def _ago(value: int, unit: str) -> str:
    return f"{value} {unit}{'' if value == 1 else 's'} ago"


def format_relative_time(target: datetime | None, now: datetime | None = None) -> str:
    if target is None:
        return ""
    now = now or utc_now()
    try:
        elapsed = (now - target).total_seconds()
    except TypeError:
        # naive vs aware: no meaningful duration
        return JUST_NOW_LABEL
    if elapsed < 0:
        return JUST_NOW_LABEL

    minutes = int(elapsed // 60)
    if minutes < 1:
        return JUST_NOW_LABEL
    if minutes < 60:
        return _ago(minutes, "minute")

    hours = minutes // 60
    if hours < 24:
        return _ago(hours, "hour")

    days = hours // 24
    if days < 7:
        return _ago(days, "day")

    weeks = days // 7
    if weeks < 5:
        return _ago(weeks, "week")

    months = days // 30
    if months < 12:
        return _ago(months, "month")

    return _ago(max(days // 365, 1), "year")


def format_exact_time(value: datetime) -> str | None:
    """Medium date, short time, in local time: "Oct 18, 2026, 9:05 AM"."""
    try:
        local = value.astimezone()
    except (OverflowError, OSError, ValueError):
        return None
    hour = local.hour % 12 or 12
    return f"{local:%b} {local.day}, {local.year}, {hour}:{local:%M} {local:%p}"


def derive_stats(notes: Iterable[Note], now: datetime | None = None) -> NoteStats:
    now = now or utc_now()
    threshold = now - RECENT_WINDOW
    total = 0
    this_week = 0
    latest: datetime | None = None

    for note in notes:
        total += 1
        created = parse_timestamp(note.created_at)
        if created is not None and created >= threshold:
            this_week += 1
        recent = latest_activity(note)
        if recent is not None and (latest is None or recent > latest):
            latest = recent

    if latest is None:
        return NoteStats(total=total, this_week=this_week, last_activity_label=NO_ACTIVITY_LABEL, last_activity_exact=None)
    return NoteStats(
        total=total,
        this_week=this_week,
        last_activity_label=format_relative_time(latest, now),
        last_activity_exact=format_exact_time(latest),
    )


def derive_view(notes: Iterable[Note], now: datetime | None = None) -> CollectionView:
    ordered = derive_order(notes)
    return CollectionView(notes=ordered, stats=derive_stats(ordered, now))


def display_title(note: Note) -> str:
    return note.title.strip() or UNTITLED_NOTE_LABEL


def deletion_message(title: str | None) -> str:
    if title and title.strip():
        return f'Deleted "{title.strip()}" successfully.'
    return "Note deleted successfully."
