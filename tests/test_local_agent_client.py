from __future__ import annotations

import io
import json
import types

import pytest
import requests
from pydantic import BaseModel

from hzn_sdk.client import LocalAgentClient, _RESTClient
from hzn_sdk.decode import PRETTY_STRING, RAW_TEXT, TypedValue
from hzn_sdk.errors import ParseError, StatusError, TransportError
from hzn_sdk.options import GlobalOptions

BASE_URL = "http://localhost:8510"


class _NodeStatus(BaseModel):
    id: str
    configstate: dict


def _fake_session(client, monkeypatch, *, status_code=200, content=b"", calls=None):
    captured = calls if calls is not None else []

    def fake_request(method, url, *, data=None, headers=None, timeout=None):  # noqa: ANN001
        captured.append(
            {"method": method, "url": url, "data": data, "headers": headers, "timeout": timeout}
        )
        return types.SimpleNamespace(status_code=status_code, content=content)

    monkeypatch.setattr(client._session, "request", fake_request)
    return captured


def test_base_url_defaults_to_horizon_url_env(monkeypatch) -> None:
    monkeypatch.setenv("HORIZON_URL", "http://tunnel:9000")
    client = LocalAgentClient()
    assert client.base_url == "http://tunnel:9000"


def test_get_joins_path_and_decodes_success_body(monkeypatch) -> None:
    client = LocalAgentClient(base_url=BASE_URL)
    calls = _fake_session(client, monkeypatch, content=b'{"b":1,"a":2}')

    result = client.get("node", [200], PRETTY_STRING)

    assert result.code == 200
    assert json.loads(result.body) == {"a": 2, "b": 1}
    assert calls[0]["method"] == "GET"
    assert calls[0]["url"] == f"{BASE_URL}/node"
    assert calls[0]["headers"] is None
    assert calls[0]["timeout"] is None


def test_get_raw_text_returns_unprocessed_body(monkeypatch) -> None:
    client = LocalAgentClient(base_url=BASE_URL)
    _fake_session(client, monkeypatch, content=b"plain text\n")

    result = client.get("status", [200], RAW_TEXT)

    assert result.body == "plain text\n"


def test_get_decodes_typed_value(monkeypatch) -> None:
    client = LocalAgentClient(base_url=BASE_URL)
    _fake_session(
        client,
        monkeypatch,
        content=b'{"id": "node1", "configstate": {"state": "configured"}}',
    )

    result = client.get("node", [200], TypedValue(_NodeStatus))

    assert result.body.id == "node1"
    assert result.body.configstate == {"state": "configured"}


def test_get_does_not_decode_secondary_good_code(monkeypatch) -> None:
    client = LocalAgentClient(base_url=BASE_URL)
    _fake_session(client, monkeypatch, status_code=404, content=b"<html>not found</html>")

    result = client.get("agreement/abc", [200, 404], TypedValue(_NodeStatus))

    assert result.code == 404
    assert result.body is None


def test_get_bad_code_raises_status_error(monkeypatch) -> None:
    client = LocalAgentClient(base_url=BASE_URL)
    _fake_session(client, monkeypatch, status_code=500, content=b"boom")

    with pytest.raises(StatusError) as exc_info:
        client.get("node", [200, 404], PRETTY_STRING)

    assert exc_info.value.status_code == 500
    assert "bad HTTP code" in str(exc_info.value)


def test_get_success_body_that_is_not_json_raises_parse_error(monkeypatch) -> None:
    client = LocalAgentClient(base_url=BASE_URL)
    _fake_session(client, monkeypatch, content=b"{oops")

    with pytest.raises(ParseError):
        client.get("node", [200], PRETTY_STRING)


def test_transport_error_message_points_at_local_agent(monkeypatch) -> None:
    monkeypatch.delenv("HORIZON_URL", raising=False)
    client = LocalAgentClient(base_url=BASE_URL)

    def fail(method, url, **kwargs):  # noqa: ANN001, ARG001
        raise requests.ConnectionError("connection refused")

    monkeypatch.setattr(client._session, "request", fail)

    with pytest.raises(TransportError) as exc_info:
        client.get("node", [200])

    message = str(exc_info.value)
    assert "systemctl status horizon" in message
    assert "connection refused" in message


def test_transport_error_message_points_at_tunnel_when_overridden(monkeypatch) -> None:
    monkeypatch.setenv("HORIZON_URL", BASE_URL)
    client = LocalAgentClient()

    def fail(method, url, **kwargs):  # noqa: ANN001, ARG001
        raise requests.ConnectionError("connection refused")

    monkeypatch.setattr(client._session, "request", fail)

    with pytest.raises(TransportError) as exc_info:
        client.get("node", [200])

    assert "ssh tunnel" in str(exc_info.value)


def test_client_base_needs_a_connect_error_message() -> None:
    class _Incomplete(_RESTClient):
        pass

    with pytest.raises(TypeError, match="_connect_error"):
        _Incomplete()


def test_put_structured_body_is_sent_as_json(monkeypatch) -> None:
    client = LocalAgentClient(base_url=BASE_URL)
    calls = _fake_session(client, monkeypatch, status_code=201, content=b"created")

    result = client.put_post("POST", "node", [201], {"id": "node1", "pattern": ""})

    assert result.code == 201
    assert result.text == "created"
    assert json.loads(calls[0]["data"]) == {"id": "node1", "pattern": ""}
    assert calls[0]["headers"]["Content-Type"] == "application/json"
    assert calls[0]["headers"]["Accept"] == "application/json"
    assert "Content-Length" not in calls[0]["headers"]


def test_put_bytes_and_text_bodies_are_uploaded(monkeypatch) -> None:
    client = LocalAgentClient(base_url=BASE_URL)
    calls = _fake_session(client, monkeypatch, status_code=200)

    client.put_post("PUT", "attribute/x", [200], b"\x00\x01\x02")
    client.put_post("PUT", "attribute/y", [200], "hello")

    assert calls[0]["data"] == b"\x00\x01\x02"
    assert calls[0]["headers"]["Content-Length"] == "3"
    assert "Content-Type" not in calls[0]["headers"]
    assert calls[1]["data"] == b"hello"
    assert calls[1]["headers"]["Content-Length"] == "5"


def test_put_bad_code_includes_response_text(monkeypatch) -> None:
    client = LocalAgentClient(base_url=BASE_URL)
    _fake_session(client, monkeypatch, status_code=409, content=b"node is already registered")

    with pytest.raises(StatusError) as exc_info:
        client.put_post("POST", "node", [201], {"id": "n"})

    assert exc_info.value.status_code == 409
    assert "node is already registered" in str(exc_info.value)


def test_dry_run_put_and_delete_make_no_network_calls(monkeypatch) -> None:
    client = LocalAgentClient(base_url=BASE_URL, options=GlobalOptions(dry_run=True))
    calls = _fake_session(client, monkeypatch, status_code=500)

    put_result = client.put_post("PUT", "node", [200], {"id": "n"})
    delete_result = client.delete("node", [204])

    assert (put_result.code, put_result.text) == (201, "")
    assert delete_result.code == 204
    assert calls == []


def test_dry_run_does_not_affect_get(monkeypatch) -> None:
    client = LocalAgentClient(base_url=BASE_URL, options=GlobalOptions(dry_run=True))
    calls = _fake_session(client, monkeypatch, content=b"{}")

    client.get("node", [200], PRETTY_STRING)

    assert len(calls) == 1


def test_delete_bad_code_raises(monkeypatch) -> None:
    client = LocalAgentClient(base_url=BASE_URL)
    calls = _fake_session(client, monkeypatch, status_code=404, content=b"no such node")

    with pytest.raises(StatusError) as exc_info:
        client.delete("node", [204])

    assert calls[0]["method"] == "DELETE"
    assert calls[0]["data"] is None
    assert "no such node" in str(exc_info.value)


def test_verbose_traces_request_and_code(monkeypatch) -> None:
    err = io.StringIO()
    client = LocalAgentClient(base_url=BASE_URL, options=GlobalOptions(verbose=True), stderr=err)
    _fake_session(client, monkeypatch, content=b"{}")

    client.get("node", [200], PRETTY_STRING)

    assert f"[verbose] GET {BASE_URL}/node" in err.getvalue()
    assert "[verbose] HTTP code: 200" in err.getvalue()


def test_quiet_by_default_without_verbose(monkeypatch) -> None:
    err = io.StringIO()
    client = LocalAgentClient(base_url=BASE_URL, stderr=err)
    _fake_session(client, monkeypatch, content=b"{}")

    client.get("node", [200], PRETTY_STRING)

    assert err.getvalue() == ""
