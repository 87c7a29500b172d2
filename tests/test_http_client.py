from __future__ import annotations

import pytest
import requests
import responses
from responses import matchers

from lms_console.exceptions import EnvelopeError, ServerError, TransportError, ValidationError
from lms_console.http_client import HttpClient

API = "https://api.example.com/api"


@responses.activate
def test_get_sends_headers_and_params(http: HttpClient) -> None:
    responses.add(
        responses.GET,
        f"{API}/users",
        json={"success": True, "data": {"users": []}},
        match=[
            matchers.header_matcher({"Authorization": "Bearer t", "Accept": "application/json"}),
            matchers.query_param_matcher({"page": "2"}),
        ],
    )
    payload = http.request("GET", "/users", headers={"Authorization": "Bearer t"}, params={"page": 2})
    assert payload == {"success": True, "data": {"users": []}}
    assert http.last_operation is not None
    assert http.last_operation.result == "success"


@responses.activate
def test_success_false_envelope_raises(http: HttpClient) -> None:
    responses.add(responses.GET, f"{API}/users", json={"success": False, "message": "Not allowed here"}, status=200)
    with pytest.raises(EnvelopeError) as exc_info:
        http.request("GET", "/users")
    assert exc_info.value.message == "Not allowed here"


@responses.activate
def test_invalid_json_raises_envelope_error(http: HttpClient) -> None:
    responses.add(responses.GET, f"{API}/users", body="<html>oops</html>", status=200)
    with pytest.raises(EnvelopeError) as exc_info:
        http.request("GET", "/users")
    assert exc_info.value.code == "INVALID_JSON"


@responses.activate
def test_empty_body_returns_none(http: HttpClient) -> None:
    responses.add(responses.DELETE, f"{API}/users/u1", body="", status=204)
    assert http.request("DELETE", "/users/u1") is None


@responses.activate
def test_http_error_carries_server_message(http: HttpClient) -> None:
    responses.add(responses.PUT, f"{API}/users/u1/role", json={"success": False, "message": "Invalid role"}, status=400)
    with pytest.raises(ValidationError) as exc_info:
        http.request("PUT", "/users/u1/role", json_body={"role": "owner"})
    assert exc_info.value.message == "Invalid role"
    assert exc_info.value.status_code == 400


@responses.activate
def test_get_retries_server_errors(config, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("lms_console.http_client.time.sleep", lambda _seconds: None)
    object.__setattr__(config, "retries", 2)
    client = HttpClient(config=config)
    responses.add(responses.GET, f"{API}/reviews/admin/all", status=503)
    responses.add(responses.GET, f"{API}/reviews/admin/all", json={"success": True, "data": {"reviews": []}})
    payload = client.request("GET", "/reviews/admin/all")
    assert payload["data"] == {"reviews": []}
    assert len(responses.calls) == 2


@responses.activate
def test_mutations_are_not_retried(config, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("lms_console.http_client.time.sleep", lambda _seconds: None)
    object.__setattr__(config, "retries", 2)
    client = HttpClient(config=config)
    responses.add(responses.PUT, f"{API}/courses/admin/bulk-action", status=500)
    with pytest.raises(ServerError):
        client.request("PUT", "/courses/admin/bulk-action", json_body={"courseIds": ["1"]})
    assert len(responses.calls) == 1


@responses.activate
def test_transport_failure_maps_to_transport_error(http: HttpClient) -> None:
    responses.add(responses.GET, f"{API}/users", body=requests.ConnectionError("refused"))
    with pytest.raises(TransportError) as exc_info:
        http.request("GET", "/users")
    assert exc_info.value.status_code == 0
    assert http.last_operation.result == "transport_error"


@responses.activate
def test_download_returns_raw_bytes(http: HttpClient) -> None:
    responses.add(
        responses.GET,
        f"{API}/enrollments/admin/export",
        body=b"id,status\n1,active\n",
        content_type="text/csv",
    )
    assert http.download("/enrollments/admin/export") == b"id,status\n1,active\n"
