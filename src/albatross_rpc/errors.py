from __future__ import annotations


class AlbatrossError(RuntimeError):
    exit_code: int = 1


class ConfigurationError(AlbatrossError):
    exit_code = 2


class TransportError(AlbatrossError):
    """Raised for HTTP-level failures: connection problems and non-200 replies."""

    exit_code = 3

    def __init__(self, status_code: int | None, body: str = "", message: str | None = None) -> None:
        if message is None:
            message = f"server responded with HTTP status code {status_code}: {body}"
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class SerializationError(AlbatrossError):
    exit_code = 4


class DecodeError(AlbatrossError):
    exit_code = 5

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


class UnitParseError(ValueError):
    """Raised when a NIM amount cannot be parsed."""


__all__ = [
    "AlbatrossError",
    "ConfigurationError",
    "DecodeError",
    "SerializationError",
    "TransportError",
    "UnitParseError",
]
