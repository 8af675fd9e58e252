"""Rendering of Python values as ClickHouse SQL literals.

A value reaches SQL text through one of two roles:

* literal values (numbers, strings, dates, arrays, ...) rendered by a writer
  looked up from the value's type, and
* identifiers, wrapped in :class:`Identifier` and rendered in backticks.

Objects implementing :class:`~chsql.protocols.Bind` render themselves, and
new value types can be taught to the serializer with
:func:`register_literal_writer` without touching the builder.
"""

import datetime
import math
from collections.abc import Mapping, Sequence
from collections.abc import Set as AbstractSet
from decimal import Decimal
from enum import Enum
from io import StringIO
from typing import TYPE_CHECKING, Any, Callable, Optional
from uuid import UUID

from chsql.exceptions import SerializationError
from chsql.sql.escape import escape_identifier, escape_string
from chsql.utils.logging import get_logger
from chsql.utils.type_guards import is_bindable

if TYPE_CHECKING:
    from chsql.protocols import SupportsWrite

__all__ = (
    "Identifier",
    "LiteralWriter",
    "LiteralWriterDispatcher",
    "register_literal_writer",
    "render_literal",
    "write_literal",
)

logger = get_logger("sql.bind")

LiteralWriter = Callable[[Any, "SupportsWrite"], None]
"""Callable writing the literal form of a value into a text buffer."""


class Identifier:
    """A name rendered as a backtick-quoted identifier instead of a string literal.

    Example:
        >>> render_literal(Identifier("my table"))
        '`my table`'
    """

    __slots__ = ("name",)

    def __init__(self, name: str) -> None:
        self.name = name

    def write_sql(self, out: "SupportsWrite") -> None:
        escape_identifier(self.name, out)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Identifier):
            return False
        return self.name == other.name

    def __hash__(self) -> int:
        return hash((Identifier, self.name))

    def __repr__(self) -> str:
        return f"Identifier({self.name!r})"


class LiteralWriterDispatcher:
    """Type to writer lookup with a per-type resolution cache.

    Lookups walk the value type's MRO once; the result is cached until the
    next registration.
    """

    __slots__ = ("_cache", "_registry")

    def __init__(self) -> None:
        self._cache: dict[type, Optional[LiteralWriter]] = {}
        self._registry: dict[type, LiteralWriter] = {}

    def register(self, type_: type, writer: LiteralWriter) -> None:
        """Register ``writer`` for ``type_`` and its subclasses.

        Args:
            type_: The value type.
            writer: Callable writing the literal form of a ``type_`` value.
        """
        self._registry[type_] = writer
        self._cache.clear()

    def get(self, value: Any) -> Optional[LiteralWriter]:
        value_type = type(value)
        if value_type in self._cache:
            return self._cache[value_type]
        writer = next((self._registry[base] for base in value_type.__mro__ if base in self._registry), None)
        self._cache[value_type] = writer
        return writer

    def clear_cache(self) -> None:
        self._cache.clear()


def _write_bool(value: bool, out: "SupportsWrite") -> None:
    out.write("true" if value else "false")


def _write_int(value: int, out: "SupportsWrite") -> None:
    out.write(int.__repr__(value))


def _write_float(value: float, out: "SupportsWrite") -> None:
    if math.isnan(value):
        out.write("nan")
    elif math.isinf(value):
        out.write("inf" if value > 0 else "-inf")
    else:
        out.write(float.__repr__(value))


def _write_decimal(value: Decimal, out: "SupportsWrite") -> None:
    if not value.is_finite():
        msg = f"cannot render non-finite decimal {value}"
        raise SerializationError(msg, type(value))
    out.write(format(value, "f"))


def _write_str(value: str, out: "SupportsWrite") -> None:
    escape_string(value, out)


def _write_bytes(value: "bytes | bytearray | memoryview", out: "SupportsWrite") -> None:
    out.write("'")
    for byte in bytes(value):
        if byte == 0x5C:
            out.write("\\\\")
        elif byte == 0x27:
            out.write("\\'")
        elif 0x20 <= byte < 0x7F:
            out.write(chr(byte))
        else:
            out.write(f"\\x{byte:02X}")
    out.write("'")


def _write_datetime(value: datetime.datetime, out: "SupportsWrite") -> None:
    if value.utcoffset() is not None:
        value = value.astimezone(datetime.timezone.utc)
    escape_string(value.replace(tzinfo=None).isoformat(sep=" "), out)


def _write_date(value: datetime.date, out: "SupportsWrite") -> None:
    escape_string(value.isoformat(), out)


def _write_time(value: datetime.time, out: "SupportsWrite") -> None:
    escape_string(value.replace(tzinfo=None).isoformat(), out)


def _write_uuid(value: UUID, out: "SupportsWrite") -> None:
    escape_string(str(value), out)


def _write_enum(value: Any, out: "SupportsWrite") -> None:
    write_literal(value.value, out)


def _write_items(items: "Any", out: "SupportsWrite", open_: str, close: str) -> None:
    out.write(open_)
    for index, item in enumerate(items):
        if index:
            out.write(",")
        write_literal(item, out)
    out.write(close)


def _write_array(value: "Sequence[Any]", out: "SupportsWrite") -> None:
    _write_items(value, out, "[", "]")


def _write_set(value: "AbstractSet[Any]", out: "SupportsWrite") -> None:
    try:
        items = sorted(value)
    except TypeError:
        # unorderable elements keep iteration order
        items = list(value)
    _write_items(items, out, "[", "]")


def _write_tuple(value: "tuple[Any, ...]", out: "SupportsWrite") -> None:
    _write_items(value, out, "(", ")")


def _write_map(value: "Mapping[Any, Any]", out: "SupportsWrite") -> None:
    out.write("map(")
    for index, (key, item) in enumerate(value.items()):
        if index:
            out.write(",")
        write_literal(key, out)
        out.write(",")
        write_literal(item, out)
    out.write(")")


def _default_dispatcher() -> LiteralWriterDispatcher:
    dispatcher = LiteralWriterDispatcher()
    dispatcher.register(bool, _write_bool)
    dispatcher.register(int, _write_int)
    dispatcher.register(float, _write_float)
    dispatcher.register(Decimal, _write_decimal)
    dispatcher.register(str, _write_str)
    dispatcher.register(bytes, _write_bytes)
    dispatcher.register(bytearray, _write_bytes)
    dispatcher.register(memoryview, _write_bytes)
    dispatcher.register(datetime.datetime, _write_datetime)
    dispatcher.register(datetime.date, _write_date)
    dispatcher.register(datetime.time, _write_time)
    dispatcher.register(UUID, _write_uuid)
    dispatcher.register(Enum, _write_enum)
    dispatcher.register(list, _write_array)
    dispatcher.register(set, _write_set)
    dispatcher.register(frozenset, _write_set)
    dispatcher.register(tuple, _write_tuple)
    dispatcher.register(dict, _write_map)
    return dispatcher


_dispatcher = _default_dispatcher()


def register_literal_writer(type_: type, writer: LiteralWriter) -> None:
    """Teach the serializer how to render values of ``type_``.

    A writer registered for a type already known to the serializer replaces
    the built-in one. Subclasses without a writer of their own inherit it.

    Args:
        type_: The value type.
        writer: Callable receiving the value and the output buffer.
    """
    _dispatcher.register(type_, writer)
    logger.debug("Registered literal writer for %s", type_.__qualname__)


def write_literal(value: Any, out: "SupportsWrite") -> None:
    """Write the SQL literal form of ``value`` into ``out``.

    Args:
        value: Value to render.
        out: Text buffer receiving the literal.

    Raises:
        SerializationError: If the value type has no literal form.
    """
    if is_bindable(value):
        value.write_sql(out)
        return
    if value is None:
        out.write("NULL")
        return

    writer = _dispatcher.get(value)
    if writer is not None:
        writer(value, out)
    elif isinstance(value, Mapping):
        _write_map(value, out)
    elif isinstance(value, AbstractSet):
        _write_set(value, out)
    elif isinstance(value, Sequence):
        _write_array(value, out)
    else:
        msg = f"unsupported value type: {type(value).__qualname__}"
        raise SerializationError(msg, type(value))


def render_literal(value: Any) -> str:
    """Return the SQL literal form of ``value``.

    Args:
        value: Value to render.

    Raises:
        SerializationError: If the value type has no literal form.

    Returns:
        The literal text, e.g. ``'foo'``, ``42`` or ``['a','b']``.
    """
    out = StringIO()
    write_literal(value, out)
    return out.getvalue()
