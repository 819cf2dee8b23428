from functools import lru_cache

import httpx

from notekeep_client.config import Settings, load_settings
from notekeep_client.context import ClientContext
from notekeep_client.session.storage import FileStorage
from notekeep_client.util import setup_logging


@lru_cache()
def get_settings():
    return load_settings()


def open_storage(settings: Settings) -> FileStorage:
    # One handle per context: a handle never hears its own writes.
    storage = FileStorage(settings.storage_dir)
    if settings.watch_storage:
        storage.start_watching()
    return storage


def build_http_client(settings: Settings) -> httpx.Client:
    return httpx.Client(base_url=settings.api_base_url, timeout=settings.http_timeout_s)


def create_context() -> ClientContext:
    settings = get_settings()
    setup_logging(settings.log_level)
    return ClientContext.over_http(
        storage=open_storage(settings),
        http_client=build_http_client(settings),
        session_key=settings.session_key,
    )
