# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

from dataclasses import dataclass

import httpx
import pytest

from hypertyper.auth import Auth
from hypertyper.config import ClientConfig
from hypertyper.errors import (
    ConfigError,
    DecodeError,
    RequestTimeout,
    SerializationError,
    StatusError,
    TransportError,
)
from hypertyper.factory import ClientFactory
from hypertyper.http.models import HttpResponse, Method
from hypertyper.result import Err, Ok
from hypertyper.testing import StubTransport

BASE = "https://api.example.com/v1"


@pytest.fixture
def stub():
    return StubTransport()


@pytest.fixture
def client(stub):
    cfg = ClientConfig(base_url=BASE, default_headers={"X-A": "1"}, timeout=5.0, user_agent="UA/1.0")
    return ClientFactory(cfg, transport_factory=stub.as_factory()).build()


def json_response(status: int, payload: str, content_type: str = "application/json") -> HttpResponse:
    return HttpResponse(status_code=status, headers={"Content-Type": content_type}, content=payload.encode("utf-8"))


@pytest.mark.parametrize("status", [200, 201, 204, 299])
def test_success_statuses_return_body_unchanged(stub, client, status):
    stub.add(f"{BASE}/items", HttpResponse(status_code=status, content=b"\x00raw\xffbytes"))
    result = client.request("GET", "/items")
    assert result == Ok(b"\x00raw\xffbytes")


def test_404_returns_status_error_with_body_verbatim(stub, client):
    stub.add(f"{BASE}/missing", HttpResponse(status_code=404, headers={"X-Reason": "gone"}, content=b"<h1>Not Found</h1>"))
    result = client.request("GET", "/missing")

    assert isinstance(result, Err)
    error = result.error
    assert isinstance(error, StatusError)
    assert error.code == 404
    assert error.body == b"<h1>Not Found</h1>"
    assert error.headers["x-reason"] == "gone"
    assert error.url == f"{BASE}/missing"


@pytest.mark.parametrize("status", [199, 301, 400, 500, 503])
def test_non_2xx_statuses_are_errors(stub, client, status):
    stub.add(f"{BASE}/x", HttpResponse(status_code=status, content=b"nope"))
    result = client.request("GET", "/x")
    assert isinstance(result.error, StatusError)
    assert result.error.code == status


def test_transport_failure_is_classified(stub, client):
    stub.add(f"{BASE}/down", httpx.ConnectError("connection refused"))
    result = client.get("/down")
    assert isinstance(result, Err)
    assert isinstance(result.error, TransportError)
    assert isinstance(result.error.cause, httpx.ConnectError)


def test_unconfigured_stub_url_is_a_transport_failure(client):
    assert isinstance(client.get("/nowhere").error, TransportError)


def test_timeout_is_classified_with_effective_timeout(stub, client):
    stub.add(f"{BASE}/slow", httpx.ReadTimeout("timed out"))
    result = client.get("/slow", timeout=0.25)
    assert isinstance(result.error, RequestTimeout)
    assert result.error.timeout == 0.25
    assert stub.requests[-1].timeout == 0.25


def test_arbitrary_transport_exceptions_never_escape(stub, client):
    stub.add(f"{BASE}/boom", RuntimeError("boom"))
    result = client.get("/boom")
    assert isinstance(result.error, TransportError)


def test_header_merge_per_request_overrides_win(stub, client):
    stub.add(f"{BASE}/h", HttpResponse(status_code=200))
    client.get("/h", headers={"X-A": "2", "X-B": "3"})

    sent = stub.requests[-1].headers
    assert sent["X-A"] == "2"
    assert sent["X-B"] == "3"
    assert sent["User-Agent"] == "UA/1.0"
    assert {k: v for k, v in sent.items() if k.startswith("X-")} == {"X-A": "2", "X-B": "3"}


def test_header_merge_is_case_insensitive(client):
    request = client.prepare("GET", "/h", headers={"x-a": "lower", "user-agent": "Override/2"})
    names = [name.lower() for name in request.headers]
    assert names.count("x-a") == 1
    assert names.count("user-agent") == 1
    assert request.headers["x-a"] == "lower"
    assert request.headers["user-agent"] == "Override/2"


def test_prepare_reflects_config_merged_with_overrides(client):
    defaults = client.prepare("get", "/users")
    assert defaults.url == f"{BASE}/users"
    assert defaults.method is Method.GET
    assert defaults.timeout == 5.0
    assert defaults.headers == {"User-Agent": "UA/1.0", "X-A": "1"}
    assert defaults.body is None

    override = client.prepare(Method.PUT, "/users/1", body="payload", timeout=1.0)
    assert override.timeout == 1.0
    assert override.body == b"payload"
    assert override.method is Method.PUT


def test_factory_defaults_are_not_mutated_by_requests(client):
    client.prepare("GET", "/a", headers={"X-A": "2"})
    assert dict(client.config.default_headers) == {"X-A": "1"}


@pytest.mark.parametrize(
    "method, options",
    [
        ("TRACE", {}),
        ("GET", {"timeout": -1}),
        ("GET", {"headers": {"Bad Name": "x"}}),
        ("GET", {"headers": {"X-A": "a\nb"}}),
        ("GET", {"body": 12}),
        ("GET", {"unknown_option": True}),
        ("GET", {"headers": 5}),
    ],
)
def test_invalid_request_options_return_config_error(stub, client, method, options):
    result = client.request(method, "/x", **options)
    assert isinstance(result, Err)
    assert isinstance(result.error, ConfigError)
    assert stub.requests == []


def test_relative_path_without_base_url_is_config_error(stub):
    client = ClientFactory(ClientConfig(), transport_factory=stub.as_factory()).build()
    assert isinstance(client.get("/relative").error, ConfigError)

    stub.add("https://absolute.example/x", HttpResponse(status_code=200, content=b"ok"))
    assert client.get("https://absolute.example/x") == Ok(b"ok")


@pytest.mark.parametrize("verb", ["get", "post", "put", "patch", "delete", "head", "options"])
def test_verb_helpers_use_matching_method(stub, client, verb):
    stub.add(f"{BASE}/v", HttpResponse(status_code=200, content=b"ok"))
    assert getattr(client, verb)("/v") == Ok(b"ok")
    assert stub.requests[-1].method is Method(verb.upper())


def test_send_returns_full_response(stub, client):
    stub.add(f"{BASE}/full", HttpResponse(status_code=201, headers={"Location": "/full/1"}, content=b"made"))
    result = client.send("POST", "/full", body=b"{}")
    assert result.is_ok()
    assert result.value.status_code == 201
    assert result.value.headers["location"] == "/full/1"


def test_get_text_decodes_body(stub, client):
    stub.add(f"{BASE}/t", HttpResponse(status_code=200, content="héllo".encode("utf-8")))
    assert client.get_text("/t") == Ok("héllo")

    stub.add(f"{BASE}/bad", HttpResponse(status_code=200, content=b"\xff\xfe\xfa"))
    assert isinstance(client.get_text("/bad").error, DecodeError)


def test_get_json_decodes_and_applies_decoder(stub, client):
    @dataclass
    class User:
        username: str

    stub.add(f"{BASE}/users/foo", json_response(200, '{"username": "foo"}'))
    assert client.get_json("/users/foo") == Ok({"username": "foo"})
    assert client.get_json("/users/foo", decoder=lambda data: User(**data)) == Ok(User("foo"))
    assert stub.requests[-1].headers["Accept"] == "application/json"

    result = client.get_json("/users/foo", decoder=lambda data: User(**data, extra=1))
    assert isinstance(result.error, DecodeError)


@pytest.mark.parametrize(
    "response, fragment",
    [
        (HttpResponse(status_code=200, content=b"{}"), "Missing Content-Type"),
        (json_response(200, "<html/>", content_type="text/html"), "Unexpected content type: text/html"),
        (json_response(200, "{not json"), "Invalid JSON"),
    ],
)
def test_get_json_decode_failures(stub, client, response, fragment):
    stub.add(f"{BASE}/j", response)
    result = client.get_json("/j")
    assert isinstance(result.error, DecodeError)
    assert fragment in result.error.reason


def test_get_json_accepts_vendor_json_types(stub, client):
    stub.add(f"{BASE}/p", json_response(200, '{"title": "x"}', content_type="application/problem+json; charset=utf-8"))
    assert client.get_json("/p") == Ok({"title": "x"})


def test_get_json_keeps_status_errors(stub, client):
    stub.add(f"{BASE}/j", json_response(500, '{"error": "boom"}'))
    result = client.get_json("/j")
    assert isinstance(result.error, StatusError)
    assert result.error.body == b'{"error": "boom"}'


def test_post_json_serializes_body_and_sends_auth(stub, client):
    @dataclass
    class NewUser:
        username: str

    stub.add(f"{BASE}/users", json_response(201, '{"id": 7}'))
    result = client.post_json("/users", NewUser("foo"), auth=Auth("secret-key"))

    assert result == Ok({"id": 7})
    sent = stub.requests[-1]
    assert sent.method is Method.POST
    assert sent.body == b'{"username": "foo"}'
    assert sent.headers["Content-Type"] == "application/json"
    assert sent.headers["Authorization"] == "Bearer secret-key"


def test_post_json_serialization_failure(stub, client):
    result = client.post_json("/users", {"when": object()})
    assert isinstance(result.error, SerializationError)
    assert stub.requests == []


def test_put_and_patch_json(stub, client):
    stub.add(f"{BASE}/r", json_response(200, "[1, 2]"))
    assert client.put_json("/r", {"a": 1}) == Ok([1, 2])
    assert stub.requests[-1].method is Method.PUT
    assert client.patch_json("/r", {"a": 2}) == Ok([1, 2])
    assert stub.requests[-1].method is Method.PATCH


def test_client_context_manager_closes_transport(stub, client):
    with client as active:
        assert active is client
    assert stub.closed is True


def test_unwrap_raises_classified_error(stub, client):
    stub.add(f"{BASE}/gone", HttpResponse(status_code=410, content=b"gone"))
    with pytest.raises(StatusError):
        client.get("/gone").unwrap()
