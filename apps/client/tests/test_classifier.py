from __future__ import annotations

import httpx
import pytest

from notekeep_client.domain.exceptions import SESSION_EXPIRED_MESSAGE, ClassifiedError, ErrorKind
from notekeep_client.remote.classifier import classify_response, classify_transport_error


def test_success_json_body_is_decoded() -> None:
    resp = httpx.Response(200, json=[{"id": 1}])
    assert classify_response(resp) == [{"id": 1}]


def test_success_text_body_is_returned_as_text() -> None:
    resp = httpx.Response(200, text="User logged in successfully")
    assert classify_response(resp) == "User logged in successfully"


def test_success_without_body_is_none() -> None:
    assert classify_response(httpx.Response(204)) is None
    assert classify_response(httpx.Response(200)) is None


def test_success_with_broken_json_is_a_server_error() -> None:
    resp = httpx.Response(200, content=b"{nope", headers={"content-type": "application/json"})
    with pytest.raises(ClassifiedError) as exc:
        classify_response(resp)
    assert exc.value.kind is ErrorKind.NETWORK_OR_SERVER


def test_401_hides_server_text_behind_fixed_message() -> None:
    resp = httpx.Response(401, json={"message": "JWT signature mismatch at filter chain"})
    with pytest.raises(ClassifiedError) as exc:
        classify_response(resp)
    assert exc.value.kind is ErrorKind.UNAUTHENTICATED
    assert exc.value.status_code == 401
    assert exc.value.message == SESSION_EXPIRED_MESSAGE


def test_401_message_can_be_overridden_by_caller() -> None:
    with pytest.raises(ClassifiedError) as exc:
        classify_response(httpx.Response(401, text="Bad credentials"), unauthenticated_message="Invalid email or password.")
    assert exc.value.message == "Invalid email or password."


@pytest.mark.parametrize(
    ("status", "kind"),
    [
        (400, ErrorKind.VALIDATION),
        (422, ErrorKind.VALIDATION),
        (404, ErrorKind.NOT_FOUND),
        (403, ErrorKind.NETWORK_OR_SERVER),
        (409, ErrorKind.NETWORK_OR_SERVER),
        (500, ErrorKind.NETWORK_OR_SERVER),
        (503, ErrorKind.NETWORK_OR_SERVER),
    ],
)
def test_status_maps_to_kind(status: int, kind: ErrorKind) -> None:
    with pytest.raises(ClassifiedError) as exc:
        classify_response(httpx.Response(status, text="boom"))
    assert exc.value.kind is kind
    assert exc.value.status_code == status
    assert exc.value.message == "boom"


def test_failure_message_prefers_json_message_field() -> None:
    with pytest.raises(ClassifiedError) as exc:
        classify_response(httpx.Response(422, json={"message": "Title is required"}))
    assert exc.value.message == "Title is required"


def test_failure_message_reads_detail_field() -> None:
    with pytest.raises(ClassifiedError) as exc:
        classify_response(httpx.Response(404, json={"detail": "Note not found"}))
    assert exc.value.message == "Note not found"


@pytest.mark.parametrize(
    "resp",
    [
        httpx.Response(500),
        httpx.Response(500, json={}),
        httpx.Response(500, json={"message": "   "}),
        httpx.Response(500, json=["odd"]),
    ],
)
def test_failure_without_usable_text_gets_generic_message(resp: httpx.Response) -> None:
    with pytest.raises(ClassifiedError) as exc:
        classify_response(resp)
    assert exc.value.message == "Request failed."


def test_transport_error_is_network_or_server_without_status() -> None:
    err = classify_transport_error(httpx.ConnectError("Connection refused"))
    assert err.kind is ErrorKind.NETWORK_OR_SERVER
    assert err.status_code is None
    assert err.message == "Connection refused"
