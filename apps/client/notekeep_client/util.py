from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from pathlib import Path


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def parse_timestamp(value: object) -> datetime | None:
    """
    Parses a server timestamp into an aware datetime.

    Naive values are taken as local time. Anything unparseable yields None,
    including instants that cannot be expressed in local time.
    """
    if not isinstance(value, str) or not value.strip():
        return None
    raw = value.strip()
    if raw.endswith(("Z", "z")):
        raw = raw[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(raw)
        local = parsed.astimezone()
    except (ValueError, OverflowError, OSError):
        return None
    if parsed.tzinfo is None:
        return local
    return parsed


def epoch_seconds(value: datetime | None) -> float:
    if value is None:
        return 0.0
    return value.timestamp()


def utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


def atomic_write_text(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(f".{path.name}.tmp.{os.getpid()}")
    tmp_path.write_text(content, encoding="utf-8")
    tmp_path.replace(path)
