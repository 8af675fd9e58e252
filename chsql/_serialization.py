"""JSON encoding used by the structured log formatter."""

import datetime
import enum
from decimal import Decimal
from typing import Any, Literal, Union, overload
from uuid import UUID

import msgspec

__all__ = ("encode_json",)


def _type_to_string(value: Any) -> Any:
    if isinstance(value, (datetime.datetime, datetime.date, datetime.time)):
        return value.isoformat()
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, (Decimal, UUID)):
        return str(value)
    if isinstance(value, (set, frozenset)):
        return list(value)
    if isinstance(value, type):
        return value.__qualname__
    return repr(value)


_encoder = msgspec.json.Encoder(enc_hook=_type_to_string)


@overload
def encode_json(data: Any, *, as_bytes: Literal[False] = ...) -> str: ...


@overload
def encode_json(data: Any, *, as_bytes: Literal[True]) -> bytes: ...


def encode_json(data: Any, *, as_bytes: bool = False) -> Union[str, bytes]:
    """Encode ``data`` as JSON.

    Values msgspec cannot encode natively fall back to their ``repr``.
    """
    encoded = _encoder.encode(data)
    if as_bytes:
        return encoded
    return encoded.decode("utf-8")
