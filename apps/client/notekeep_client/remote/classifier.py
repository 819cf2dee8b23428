from __future__ import annotations

from typing import Any

import httpx

from notekeep_client.domain.exceptions import (
    GENERIC_FAILURE_MESSAGE,
    SESSION_EXPIRED_MESSAGE,
    ClassifiedError,
    ErrorKind,
)

UNEXPECTED_RESPONSE_MESSAGE = "Unexpected response from server."

_KIND_BY_STATUS = {
    400: ErrorKind.VALIDATION,
    404: ErrorKind.NOT_FOUND,
    422: ErrorKind.VALIDATION,
}


def _is_json(response: httpx.Response) -> bool:
    return "application/json" in response.headers.get("content-type", "").lower()


def kind_for_status(status_code: int) -> ErrorKind:
    if status_code == 401:
        return ErrorKind.UNAUTHENTICATED
    return _KIND_BY_STATUS.get(status_code, ErrorKind.NETWORK_OR_SERVER)


def failure_message(response: httpx.Response) -> str:
    body: Any
    if _is_json(response):
        try:
            body = response.json()
        except ValueError:
            body = response.text
    else:
        body = response.text

    if isinstance(body, str):
        return body.strip() or GENERIC_FAILURE_MESSAGE
    if isinstance(body, dict):
        for field in ("message", "detail"):
            value = body.get(field)
            if isinstance(value, str) and value.strip():
                return value.strip()
    return GENERIC_FAILURE_MESSAGE


def classify_response(
    response: httpx.Response,
    *,
    unauthenticated_message: str = SESSION_EXPIRED_MESSAGE,
) -> Any:
    """
    Returns the decoded success payload or raises `ClassifiedError`.

    2xx bodies decode as JSON when the content type says so, otherwise as text;
    an empty body decodes to None. A 401 never carries the server's text.
    """
    status = response.status_code
    if response.is_success:
        if not response.content:
            return None
        if not _is_json(response):
            return response.text
        try:
            return response.json()
        except ValueError as e:
            raise ClassifiedError(ErrorKind.NETWORK_OR_SERVER, UNEXPECTED_RESPONSE_MESSAGE, status) from e

    kind = kind_for_status(status)
    if kind is ErrorKind.UNAUTHENTICATED:
        raise ClassifiedError(kind, unauthenticated_message, status)
    raise ClassifiedError(kind, failure_message(response), status)


def classify_transport_error(exc: httpx.RequestError) -> ClassifiedError:
    message = str(exc).strip() or exc.__class__.__name__
    return ClassifiedError(ErrorKind.NETWORK_OR_SERVER, message, None)
