"""
Transport - JSON-RPC over HTTP.

One HTTP exchange per call or batch, using a short-lived httpx client.
No retries and no connection reuse between exchanges.
"""

from __future__ import annotations

import base64
import logging
from dataclasses import dataclass, field, replace
from typing import Optional, Sequence

import httpx

from .errors import ConfigurationError, DecodeError, TransportError
from .protocol.envelope import (
    Request,
    Response,
    decode_batch,
    decode_response,
    encode_batch,
    encode_request,
)

logger = logging.getLogger(__name__)

ALLOWED_SCHEMES = ("http://", "https://", "ws://", "wss://")
HTTP_METHODS = ("POST", "GET")
DEFAULT_TIMEOUT = 30.0


def is_valid_url(url: str) -> bool:
    """Return True if ``url`` starts with one of the supported schemes."""
    return isinstance(url, str) and url.startswith(ALLOWED_SCHEMES)


@dataclass(frozen=True)
class BasicAuth:
    username: str
    password: str = field(repr=False)

    def header_value(self) -> str:
        token = base64.b64encode(f"{self.username}:{self.password}".encode("utf-8")).decode("ascii")
        return f"Basic {token}"


@dataclass(frozen=True)
class HttpClient:
    """
    Thin HTTP client for an Albatross JSON-RPC endpoint.

    Configuration is fixed at construction; use ``with_auth`` to derive a
    client with credentials. Instances hold no mutable state and can be
    shared between threads.

    Attributes:
        url: Endpoint URL (http, https, ws or wss scheme)
        auth: Basic auth credentials, or None to send no Authorization header
        http_method: "POST" (default) or "GET"
        timeout: Per-exchange timeout in seconds
        transport: Optional httpx transport, e.g. for tests
    """

    url: str
    auth: Optional[BasicAuth] = None
    http_method: str = "POST"
    timeout: float = DEFAULT_TIMEOUT
    transport: Optional[httpx.BaseTransport] = field(default=None, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not is_valid_url(self.url):
            raise ConfigurationError(f"Invalid url: {self.url!r}")
        method = self.http_method.upper()
        if method not in HTTP_METHODS:
            raise ConfigurationError(f"Unsupported HTTP method: {self.http_method!r}")
        object.__setattr__(self, "http_method", method)

    @property
    def use_auth(self) -> bool:
        return self.auth is not None

    def with_auth(self, username: str, password: str) -> "HttpClient":
        return replace(self, auth=BasicAuth(username, password))

    def without_auth(self) -> "HttpClient":
        return replace(self, auth=None)

    def call(self, request: Request) -> Response:
        """Send one request and decode the response envelope."""
        body = encode_request(request)
        logger.debug("rpc call %s id=%r -> %s", request.method, request.id, self.url)
        return decode_response(self._send(body))

    def batch(self, requests: Sequence[Request]) -> list[Response]:
        """
        Send several requests in one exchange.

        The returned list is in whatever order the node replied; pair
        responses with requests by id (see ``index_by_id``).
        Request ids must be unique within the batch.
        """
        if not requests:
            raise ConfigurationError("A batch must contain at least one request")
        seen: set = set()
        for request in requests:
            if request.id in seen:
                raise ConfigurationError(
                    f"Duplicate request id in batch: {request.id!r}; give each request its own id"
                )
            seen.add(request.id)
        body = encode_batch(requests)
        logger.debug(
            "rpc batch of %d [%s] -> %s",
            len(requests),
            ", ".join(request.method for request in requests),
            self.url,
        )
        responses = decode_batch(self._send(body))
        if len(responses) != len(requests):
            raise DecodeError(
                f"Batch response has {len(responses)} entries, expected {len(requests)}"
            )
        return responses

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.auth is not None:
            headers["Authorization"] = self.auth.header_value()
        return headers

    def _send(self, body: str) -> bytes:
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.request(
                    self.http_method,
                    self.url,
                    content=body.encode("utf-8"),
                    headers=self._headers(),
                )
        except httpx.HTTPError as exc:
            raise TransportError(None, message=f"HTTP request to {self.url} failed: {exc}") from exc

        if response.status_code != 200:
            raise TransportError(response.status_code, response.text)
        return response.content


__all__ = [
    "ALLOWED_SCHEMES",
    "BasicAuth",
    "HttpClient",
    "is_valid_url",
]
