"""Tests for the HTTP transport."""

from __future__ import annotations

import dataclasses
import json

import httpx
import pytest
from pytest_httpx import HTTPXMock

from albatross_rpc.errors import ConfigurationError, DecodeError, SerializationError, TransportError
from albatross_rpc.protocol.envelope import JsonRpcError, Request, index_by_id
from albatross_rpc.protocol.unwrap import unwrap
from albatross_rpc.transport import BasicAuth, HttpClient, is_valid_url

URL = "https://test.albatross.example/rpc"


@pytest.fixture()
def client() -> HttpClient:
    return HttpClient(URL, auth=BasicAuth("username", "password"))


class TestUrlValidation:
    """Tests for URL validation at construction."""

    @pytest.mark.parametrize(
        "url",
        ["http://127.0.0.1:8648", "https://node.example", "ws://node.example", "wss://node.example/ws"],
    )
    def test_accepts_supported_schemes(self, url: str) -> None:
        assert is_valid_url(url)
        assert HttpClient(url).url == url

    @pytest.mark.parametrize(
        "url",
        ["127.0.0.1:8648", "ftp://node.example", "node.example", "", " http://node.example", "HTTP:/x"],
    )
    def test_rejects_other_urls(self, url: str) -> None:
        assert not is_valid_url(url)
        with pytest.raises(ConfigurationError):
            HttpClient(url)

    def test_rejects_unknown_http_method(self) -> None:
        with pytest.raises(ConfigurationError):
            HttpClient(URL, http_method="PUT")


class TestClientConfiguration:
    """Tests for immutable client configuration."""

    def test_auth_header_value(self) -> None:
        assert BasicAuth("username", "password").header_value() == "Basic dXNlcm5hbWU6cGFzc3dvcmQ="

    def test_with_auth_returns_new_client(self) -> None:
        plain = HttpClient(URL)
        authed = plain.with_auth("username", "password")
        assert not plain.use_auth
        assert authed.use_auth
        assert authed.without_auth() == plain

    def test_client_is_frozen(self, client: HttpClient) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            client.url = "http://other"  # type: ignore[misc]

    def test_password_not_in_repr(self) -> None:
        client = HttpClient(URL, auth=BasicAuth("user", "s3cret"))
        assert "s3cret" not in repr(client)


class TestCall:
    """Tests for HttpClient.call."""

    def test_call_ok(self, client: HttpClient, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(method="POST", url=URL, json={"jsonrpc": "2.0", "data": 1234, "id": 1})

        response = client.call(Request.new("getLatestBlock", request_id=1))

        assert unwrap(int, response) == 1234
        requests = httpx_mock.get_requests()
        assert len(requests) == 1
        assert requests[0].content == b'{"jsonrpc":"2.0","id":1,"method":"getLatestBlock","params":[]}'
        assert requests[0].headers["Authorization"] == "Basic dXNlcm5hbWU6cGFzc3dvcmQ="
        assert requests[0].headers["Content-Type"] == "application/json"

    def test_no_auth_header_without_auth(self, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(method="POST", url=URL, json={"jsonrpc": "2.0", "data": 1, "id": 1})

        HttpClient(URL).call(Request.new("getBlockNumber", request_id=1))

        assert "Authorization" not in httpx_mock.get_requests()[0].headers

    def test_rpc_error(self, client: HttpClient, httpx_mock: HTTPXMock) -> None:
        tx_hash = "21cfba017cf06251846eb5085e52a2388b2c4c05bd1b155063358ea63f75ac53"
        httpx_mock.add_response(
            method="POST",
            url=URL,
            json={
                "jsonrpc": "2.0",
                "error": {
                    "code": -32603,
                    "message": "Internal error",
                    "data": f"Multiple transactions found: {tx_hash}",
                },
                "id": 1,
            },
        )

        response = client.call(Request.new("getTransactionByHash", tx_hash, request_id=1))

        body = json.loads(httpx_mock.get_requests()[0].content)
        assert body["params"] == [tx_hash]
        with pytest.raises(JsonRpcError) as exc:
            unwrap(str, response)
        assert str(exc.value) == (
            f"JSON-RPC Error -32603 - Internal error. Error data: Multiple transactions found: {tx_hash}"
        )

    def test_non_200_status(self, client: HttpClient, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(method="POST", url=URL, status_code=401, text="Unauthorized")

        with pytest.raises(TransportError) as exc:
            client.call(Request.new("getBlockNumber", request_id=1))

        assert exc.value.status_code == 401
        assert exc.value.body == "Unauthorized"
        assert str(exc.value) == "server responded with HTTP status code 401: Unauthorized"

    def test_connection_error(self, client: HttpClient, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_exception(httpx.ConnectError("Connection refused"))

        with pytest.raises(TransportError) as exc:
            client.call(Request.new("getBlockNumber", request_id=1))

        assert exc.value.status_code is None
        assert isinstance(exc.value.__cause__, httpx.ConnectError)

    def test_body_not_json(self, client: HttpClient, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(method="POST", url=URL, text="<html>oops</html>")

        with pytest.raises(DecodeError):
            client.call(Request.new("getBlockNumber", request_id=1))

    def test_body_not_an_envelope(self, client: HttpClient, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(method="POST", url=URL, json={"result": 1})

        with pytest.raises(DecodeError):
            client.call(Request.new("getBlockNumber", request_id=1))

    def test_serialization_error_sends_nothing(self, client: HttpClient, httpx_mock: HTTPXMock) -> None:
        with pytest.raises(SerializationError):
            client.call(Request.new("importRawKey", {1, 2}, request_id=1))
        assert httpx_mock.get_requests() == []

    def test_get_method(self, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(method="GET", url=URL, json={"jsonrpc": "2.0", "data": True, "id": 1})

        client = HttpClient(URL, http_method="get")
        response = client.call(Request.new("isConsensusEstablished", request_id=1))

        assert client.http_method == "GET"
        assert unwrap(bool, response) is True
        assert httpx_mock.get_requests()[0].method == "GET"


class TestBatch:
    """Tests for HttpClient.batch."""

    def test_batch_pairs_by_id(self, client: HttpClient, httpx_mock: HTTPXMock) -> None:
        # The node answers in reverse order
        httpx_mock.add_response(
            method="POST",
            url=URL,
            json=[
                {"jsonrpc": "2.0", "id": 2, "data": ["NQ07 0000"]},
                {"jsonrpc": "2.0", "id": 1, "data": 17},
            ],
        )
        block_number = Request.new("getBlockNumber", request_id=1)
        accounts = Request.new("listAccounts", request_id=2)

        responses = client.batch([block_number, accounts])

        body = json.loads(httpx_mock.get_requests()[0].content)
        assert [item["method"] for item in body] == ["getBlockNumber", "listAccounts"]
        by_id = index_by_id(responses)
        assert unwrap(int, by_id[block_number.id]) == 17
        assert unwrap(list[str], by_id[accounts.id]) == ["NQ07 0000"]

    def test_batch_element_error_reported_on_unwrap(self, client: HttpClient, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(
            method="POST",
            url=URL,
            json=[
                {"jsonrpc": "2.0", "id": 1, "data": 17},
                {"jsonrpc": "2.0", "id": 2, "error": {"code": -32601, "message": "Method not found"}},
            ],
        )

        responses = index_by_id(
            client.batch([Request.new("getBlockNumber", request_id=1), Request.new("nope", request_id=2)])
        )

        assert unwrap(int, responses[1]) == 17
        with pytest.raises(JsonRpcError):
            unwrap(int, responses[2])

    def test_batch_length_mismatch(self, client: HttpClient, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(method="POST", url=URL, json=[{"jsonrpc": "2.0", "id": 1, "data": 1}])

        with pytest.raises(DecodeError):
            client.batch([Request.new("a", request_id=1), Request.new("b", request_id=2)])

    def test_batch_http_failure(self, client: HttpClient, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(method="POST", url=URL, status_code=500, text="boom")

        with pytest.raises(TransportError) as exc:
            client.batch([Request.new("a", request_id=1)])
        assert exc.value.status_code == 500

    def test_empty_batch(self, client: HttpClient) -> None:
        with pytest.raises(ConfigurationError):
            client.batch([])

    def test_duplicate_ids_rejected_before_sending(self, client: HttpClient, httpx_mock: HTTPXMock) -> None:
        # Requests built in the same second share the time-derived id
        first = Request.new("getBlockNumber", request_id=1792392740)
        second = Request.new("getPeerCount", request_id=1792392740)

        with pytest.raises(ConfigurationError) as exc:
            client.batch([first, second])
        assert "1792392740" in str(exc.value)
        assert not httpx_mock.get_requests()
