from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Callable

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from notekeep_client.domain.ports import StorageEvent, StorageListener
from notekeep_client.signals import Signal
from notekeep_client.util import atomic_write_text

logger = logging.getLogger("notekeep.storage")


class MemoryStorage:
    """
    Backing store for contexts that live in the same process.

    Each context takes its own handle via `connect()`; a write through one
    handle notifies the listeners of every other handle.
    """

    def __init__(self) -> None:
        self._data: dict[str, str] = {}
        self._handles: list[MemoryStorageHandle] = []

    def connect(self) -> "MemoryStorageHandle":
        handle = MemoryStorageHandle(self)
        self._handles.append(handle)
        return handle

    def _detach(self, handle: "MemoryStorageHandle") -> None:
        if handle in self._handles:
            self._handles.remove(handle)

    def _read(self, key: str) -> str | None:
        return self._data.get(key)

    def _write(self, origin: "MemoryStorageHandle", key: str, value: str | None) -> None:
        old_value = self._data.get(key)
        if value is None:
            self._data.pop(key, None)
        else:
            self._data[key] = value
        if old_value == value:
            return
        event = StorageEvent(key=key, old_value=old_value, new_value=value)
        for handle in list(self._handles):
            if handle is not origin:
                handle.changes.emit(event)


class MemoryStorageHandle:
    def __init__(self, backend: MemoryStorage) -> None:
        self._backend = backend
        self.changes: Signal[StorageEvent] = Signal("storage")

    def get_item(self, key: str) -> str | None:
        return self._backend._read(key)

    def set_item(self, key: str, value: str) -> None:
        self._backend._write(self, key, value)

    def remove_item(self, key: str) -> None:
        self._backend._write(self, key, None)

    def add_listener(self, listener: StorageListener) -> Callable[[], None]:
        return self.changes.connect(listener)

    def close(self) -> None:
        self._backend._detach(self)


class _StorageDirHandler(FileSystemEventHandler):
    def __init__(self, storage: "FileStorage") -> None:
        super().__init__()
        self.storage = storage

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        self.storage.poll()


class FileStorage:
    """
    Directory-backed store shared between processes.

    Every key lives in `<directory>/<key>.json`. Changes written by other
    processes are noticed by `poll()`, which the watchdog observer calls on
    every filesystem event once `start_watching()` has run.
    """

    SUFFIX = ".json"

    def __init__(self, directory: Path) -> None:
        self.directory = directory
        self.directory.mkdir(parents=True, exist_ok=True)
        self.changes: Signal[StorageEvent] = Signal("storage")
        self._lock = threading.RLock()
        self._observer: Observer | None = None
        # Last value this handle wrote or announced, per key.
        self._snapshot: dict[str, str | None] = {key: self._read(key) for key in self._keys_on_disk()}

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}{self.SUFFIX}"

    def _keys_on_disk(self) -> set[str]:
        keys: set[str] = set()
        for p in self.directory.iterdir():
            if p.name.startswith(".") or p.suffix != self.SUFFIX or not p.is_file():
                continue
            keys.add(p.stem)
        return keys

    def _read(self, key: str) -> str | None:
        try:
            return self._path(key).read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning("storage_read_failed", extra={"key": key, "error": str(e)})
            return None

    def get_item(self, key: str) -> str | None:
        return self._read(key)

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            self._snapshot[key] = value
            atomic_write_text(self._path(key), value)

    def remove_item(self, key: str) -> None:
        with self._lock:
            self._snapshot[key] = None
            self._path(key).unlink(missing_ok=True)

    def add_listener(self, listener: StorageListener) -> Callable[[], None]:
        return self.changes.connect(listener)

    def poll(self) -> list[StorageEvent]:
        events: list[StorageEvent] = []
        with self._lock:
            for key in sorted(set(self._snapshot) | self._keys_on_disk()):
                current = self._read(key)
                previous = self._snapshot.get(key)
                if current == previous:
                    continue
                self._snapshot[key] = current
                events.append(StorageEvent(key=key, old_value=previous, new_value=current))
            # Delivered under the lock: watchdog and manual polls never interleave.
            for event in events:
                logger.debug("storage_external_change", extra={"key": event.key, "removed": event.new_value is None})
                self.changes.emit(event)
        return events

    def start_watching(self) -> None:
        if self._observer is not None:
            return
        observer = Observer()
        observer.schedule(_StorageDirHandler(self), str(self.directory), recursive=False)
        observer.daemon = True
        observer.start()
        self._observer = observer
        logger.info("storage_watch_started", extra={"directory": str(self.directory)})

    def close(self) -> None:
        if self._observer is None:
            return
        self._observer.stop()
        self._observer.join(timeout=5.0)
        self._observer = None
