"""Runtime-checkable protocols used by the SQL builder.

Values and row types opt into the builder through these protocols instead of
inheriting from a chsql base class.
"""

from collections.abc import Sequence
from typing import ClassVar, Protocol, runtime_checkable

__all__ = ("Bind", "Row", "SupportsWrite")


@runtime_checkable
class SupportsWrite(Protocol):
    """Text buffer the serializer writes into (``io.StringIO`` and friends)."""

    def write(self, text: str, /) -> int:
        """Append ``text`` to the buffer."""
        ...


@runtime_checkable
class Bind(Protocol):
    """A value that renders itself as a SQL literal or identifier."""

    def write_sql(self, out: SupportsWrite) -> None:
        """Write the SQL form of the value into ``out``.

        Raises:
            SerializationError: If the value cannot be rendered.
        """
        ...


@runtime_checkable
class Row(Protocol):
    """A row type that declares its column names explicitly."""

    __column_names__: ClassVar[Sequence[str]]
