from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import BaseModel, ValidationError

from notekeep_client.domain.entities import Identity, Note
from notekeep_client.domain.exceptions import SESSION_EXPIRED_MESSAGE, ClassifiedError, ErrorKind
from notekeep_client.domain.schemas import LoginIn, NoteOut, NoteWriteIn, RegisterIn
from notekeep_client.remote.classifier import (
    UNEXPECTED_RESPONSE_MESSAGE,
    classify_response,
    classify_transport_error,
)

logger = logging.getLogger("notekeep.gateway")

AUTH_PATH = "/api/auth"
NOTES_PATH = "/api/notes"
# 401 text for login and register, where no session exists yet to expire.
INVALID_CREDENTIALS_MESSAGE = "Invalid email or password."


def _send(
    client: httpx.Client,
    method: str,
    path: str,
    *,
    payload: BaseModel | None = None,
    unauthenticated_message: str = SESSION_EXPIRED_MESSAGE,
) -> Any:
    body = payload.model_dump(by_alias=True) if payload is not None else None
    try:
        resp = client.request(method, path, json=body, headers={"Accept": "application/json"})
    except httpx.RequestError as e:
        logger.warning("request_failed", extra={"method": method, "path": path, "error": str(e)})
        raise classify_transport_error(e) from e

    logger.info("request", extra={"method": method, "path": path, "status": resp.status_code})
    return classify_response(resp, unauthenticated_message=unauthenticated_message)


def _note_from_payload(data: Any) -> Note:
    try:
        return NoteOut.model_validate(data).to_entity()
    except ValidationError as e:
        raise ClassifiedError(ErrorKind.NETWORK_OR_SERVER, UNEXPECTED_RESPONSE_MESSAGE, 200) from e


class HttpNoteGateway:
    """Note CRUD over a cookie-carrying `httpx.Client`. No caching, no retries."""

    def __init__(self, client: httpx.Client) -> None:
        self.client = client

    def list_notes(self) -> list[Note]:
        data = _send(self.client, "GET", NOTES_PATH)
        if not isinstance(data, list):
            return []
        return [_note_from_payload(item) for item in data]

    def create_note(self, title: str, content: str) -> Note:
        data = _send(self.client, "POST", NOTES_PATH, payload=NoteWriteIn(title=title, content=content))
        return _note_from_payload(data)

    def get_note(self, note_id: str) -> Note:
        return _note_from_payload(_send(self.client, "GET", f"{NOTES_PATH}/{note_id}"))

    def update_note(self, note_id: str, title: str, content: str) -> Note:
        data = _send(
            self.client,
            "PUT",
            f"{NOTES_PATH}/{note_id}",
            payload=NoteWriteIn(title=title, content=content),
        )
        return _note_from_payload(data)

    def delete_note(self, note_id: str) -> None:
        _send(self.client, "DELETE", f"{NOTES_PATH}/{note_id}")


class HttpAuthGateway:
    """
    Login and registration calls.

    The service answers both with an opaque body and a session cookie, so the
    identity is built from what the user submitted. The email is the login key
    and doubles as the identity id.
    """

    def __init__(self, client: httpx.Client) -> None:
        self.client = client

    def login(self, email: str, password: str) -> Identity:
        _send(
            self.client,
            "POST",
            f"{AUTH_PATH}/login",
            payload=LoginIn(email=email, password=password),
            unauthenticated_message=INVALID_CREDENTIALS_MESSAGE,
        )
        return Identity(id=email, email=email)

    def register(self, username: str, full_name: str, email: str, password: str) -> Identity:
        _send(
            self.client,
            "POST",
            f"{AUTH_PATH}/register",
            payload=RegisterIn(username=username, full_name=full_name, email=email, password=password),
            unauthenticated_message=INVALID_CREDENTIALS_MESSAGE,
        )
        return Identity(id=email, email=email, username=username, full_name=full_name)
