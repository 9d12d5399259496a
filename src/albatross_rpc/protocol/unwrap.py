"""
Unwrap - Decode a raw JSON payload into a caller-chosen type.

Works on anything that can report an error and hand out raw JSON,
so the same call decodes a whole response or a nested raw section of
an already-typed model.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Optional, Protocol, TypeVar, Union, runtime_checkable

from pydantic import TypeAdapter, ValidationError

from ..errors import DecodeError

T = TypeVar("T")


@runtime_checkable
class Unwrappable(Protocol):
    def get_error(self) -> Optional[BaseException]: ...

    def get_raw(self) -> Optional[Union[str, bytes]]: ...


@lru_cache(maxsize=128)
def _adapter_for(target_type: Any) -> TypeAdapter:
    return TypeAdapter(target_type)


def unwrap(target_type: type[T], obj: Unwrappable) -> T:
    """
    Return the payload of ``obj`` decoded as ``target_type``.

    A JSON ``null`` payload yields None whatever ``target_type`` is.

    Raises:
        The error reported by ``obj``, unchanged, if there is one.
        DecodeError: If the payload is missing, malformed, or does not
            match ``target_type``.
    """
    error = obj.get_error()
    if error is not None:
        raise error

    raw = obj.get_raw()
    if raw is None:
        raise DecodeError("No payload to decode")
    if _is_null(raw):
        return None  # type: ignore[return-value]

    try:
        return _adapter_for(target_type).validate_json(raw, strict=True)
    except ValidationError as exc:
        details = [
            f"{'/'.join(str(part) for part in err['loc']) or '<root>'}: {err['msg']}"
            for err in exc.errors()
        ]
        raise DecodeError(
            f"Cannot decode payload as {_type_name(target_type)}: {details[0] if details else exc}",
            errors=details,
        ) from exc


def _is_null(raw: Union[str, bytes]) -> bool:
    text = raw.decode("utf-8", errors="replace") if isinstance(raw, bytes) else raw
    return text.strip() == "null"


def _type_name(target_type: Any) -> str:
    return getattr(target_type, "__name__", None) or repr(target_type)


__all__ = ["Unwrappable", "unwrap"]
