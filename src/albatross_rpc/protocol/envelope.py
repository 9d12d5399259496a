"""
Envelope - JSON-RPC 2.0 request and response types.

A ``Response`` keeps its success payload as raw JSON text; it is only
decoded into a concrete type when a caller asks for one through
``unwrap``.
"""

from __future__ import annotations

import json
import time
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional, Union

from ..errors import AlbatrossError, DecodeError, SerializationError
from .schemas import RESPONSE_SCHEMA, SchemaRegistry

JSONRPC_VERSION = "2.0"

RequestId = Union[int, str]


class JsonRpcError(AlbatrossError):
    """
    Error object returned by the node inside a response envelope.

    Raised as-is by ``unwrap`` when a response carries it.
    """

    exit_code = 6

    def __init__(self, code: int, message: str, data: str = "") -> None:
        super().__init__(code, message, data)
        self.code = code
        self.message = message
        self.data = data

    def __str__(self) -> str:
        if self.data:
            return f"JSON-RPC Error {self.code} - {self.message}. Error data: {self.data}"
        return f"JSON-RPC Error {self.code} - {self.message}"

    def __repr__(self) -> str:
        return f"JsonRpcError(code={self.code!r}, message={self.message!r}, data={self.data!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, JsonRpcError):
            return NotImplemented
        return (self.code, self.message, self.data) == (other.code, other.message, other.data)

    def __hash__(self) -> int:
        return hash((self.code, self.message, self.data))

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data:
            result["data"] = self.data
        return result

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "JsonRpcError":
        data = payload.get("data")
        if data is None:
            data = ""
        elif not isinstance(data, str):
            data = _compact(data)
        return cls(code=payload["code"], message=payload["message"], data=data)


@dataclass(frozen=True)
class Request:
    method: str
    params: tuple[Any, ...] = field(default_factory=tuple)
    id: RequestId = 0

    jsonrpc = JSONRPC_VERSION

    @classmethod
    def new(cls, method: str, *params: Any, request_id: Optional[RequestId] = None) -> "Request":
        """
        Build a request for ``method`` with positional ``params``.

        When ``request_id`` is omitted the current Unix time in seconds is used.
        """
        if request_id is None:
            request_id = int(time.time())
        return cls(method=method, params=tuple(params), id=request_id)

    def to_dict(self) -> dict[str, Any]:
        return {
            "jsonrpc": self.jsonrpc,
            "id": self.id,
            "method": self.method,
            "params": list(self.params),
        }


@dataclass(frozen=True)
class Response:
    jsonrpc: str
    id: Optional[RequestId]
    error: Optional[JsonRpcError] = None
    data: Optional[str] = None

    def get_error(self) -> Optional[JsonRpcError]:
        return self.error

    def get_raw(self) -> Optional[str]:
        return self.data

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def from_dict(cls, payload: Any, registry: SchemaRegistry | None = None) -> "Response":
        registry = registry or SchemaRegistry.default()
        registry.validate_instance(payload, RESPONSE_SCHEMA)

        error = payload.get("error")
        raw = _compact(payload["data"]) if "data" in payload else None
        return cls(
            jsonrpc=payload["jsonrpc"],
            id=payload.get("id"),
            error=JsonRpcError.from_dict(error) if error is not None else None,
            data=raw,
        )


def _compact(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def _dumps(payload: Any) -> str:
    try:
        return json.dumps(payload, separators=(",", ":"), allow_nan=False)
    except (TypeError, ValueError) as exc:
        raise SerializationError(f"Cannot encode JSON-RPC request: {exc}") from exc


def encode_request(request: Request) -> str:
    return _dumps(request.to_dict())


def encode_batch(requests: Iterable[Request]) -> str:
    return _dumps([request.to_dict() for request in requests])


def load_body(body: str | bytes) -> Any:
    """Parse an HTTP body as JSON, raising ``DecodeError`` on malformed input."""
    try:
        return json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise DecodeError(f"Response body is not valid JSON: {exc}") from exc


def decode_response(body: str | bytes) -> Response:
    return Response.from_dict(load_body(body))


def decode_batch(body: str | bytes) -> list[Response]:
    payload = load_body(body)
    if isinstance(payload, dict):
        # A node rejecting the whole batch answers with a single error object
        rejected = Response.from_dict(payload)
        if rejected.error is not None:
            raise rejected.error
    if not isinstance(payload, list):
        raise DecodeError("Batch response body is not a JSON array")
    return [Response.from_dict(item) for item in payload]


def index_by_id(responses: Iterable[Response]) -> dict[Optional[RequestId], Response]:
    """
    Key batch responses by their echoed id.

    Batch replies are not guaranteed to come back in request order,
    so callers must pair them with their requests by id.
    """
    indexed: dict[Optional[RequestId], Response] = {}
    for response in responses:
        if response.id in indexed:
            raise DecodeError(f"Duplicate response id in batch: {response.id!r}")
        indexed[response.id] = response
    return indexed


__all__ = [
    "JSONRPC_VERSION",
    "JsonRpcError",
    "Request",
    "RequestId",
    "Response",
    "decode_batch",
    "decode_response",
    "encode_batch",
    "encode_request",
    "index_by_id",
    "load_body",
]
