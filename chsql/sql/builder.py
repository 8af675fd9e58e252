"""Positional SQL templates bound into complete ClickHouse statements.

Template syntax:

* ``?`` is one positional argument, bound left to right by :meth:`SQLBuilder.bind_arg`,
* ``??`` is a literal ``?``,
* ``?fields`` is the column list of a row type, bound by :meth:`SQLBuilder.bind_fields`.

The builder never raises while binding. The first misuse moves it into a
failed state that every later call preserves, and :meth:`SQLBuilder.finish`
reports that first failure.
"""

from io import StringIO
from typing import TYPE_CHECKING, Final, Optional, Union, cast

from mypy_extensions import mypyc_attr

from chsql.exceptions import BuilderConsumedError, InvalidParamsError, SerializationError
from chsql.row import join_column_names
from chsql.sql.bind import write_literal
from chsql.utils.logging import event_fields, get_logger

if TYPE_CHECKING:
    from chsql.typing import BindValue, RowType

__all__ = (
    "ARGUMENT_SLOT",
    "FIELDS_SLOT",
    "ArgumentSlot",
    "Failed",
    "FieldsSlot",
    "InProgress",
    "Literal",
    "SQLBuilder",
    "Segment",
    "parse_template",
)

logger = get_logger("sql.builder")

PLACEHOLDER: Final = "?"
FIELDS_KEYWORD: Final = "fields"
ERROR_PREFIX: Final = "invalid SQL: "


class Literal:
    """Template text emitted verbatim."""

    __slots__ = ("text",)

    def __init__(self, text: str) -> None:
        self.text = text

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Literal):
            return False
        return self.text == other.text

    def __hash__(self) -> int:
        return hash((Literal, self.text))

    def __repr__(self) -> str:
        return f"Literal({self.text!r})"


class ArgumentSlot:
    """A ``?`` placeholder awaiting one bound value."""

    __slots__ = ()

    placeholder: Final = "?"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, ArgumentSlot)

    def __hash__(self) -> int:
        return hash(ArgumentSlot)

    def __repr__(self) -> str:
        return "ArgumentSlot()"


class FieldsSlot:
    """A ``?fields`` placeholder awaiting a row type's column list."""

    __slots__ = ()

    placeholder: Final = "?fields"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, FieldsSlot)

    def __hash__(self) -> int:
        return hash(FieldsSlot)

    def __repr__(self) -> str:
        return "FieldsSlot()"


ARGUMENT_SLOT: Final = ArgumentSlot()
FIELDS_SLOT: Final = FieldsSlot()

Segment = Union[Literal, ArgumentSlot, FieldsSlot]


class InProgress:
    """Live builder state: parsed segments plus an optional output format."""

    __slots__ = ("output_format", "segments")

    def __init__(self, segments: "list[Segment]", output_format: Optional[str] = None) -> None:
        self.segments = segments
        self.output_format = output_format

    def __repr__(self) -> str:
        return f"InProgress(segments={self.segments!r}, output_format={self.output_format!r})"


class Failed:
    """Terminal builder state holding the first failure message."""

    __slots__ = ("message",)

    def __init__(self, message: str) -> None:
        self.message = message

    def __repr__(self) -> str:
        return f"Failed(message={self.message!r})"


def parse_template(template: str) -> "list[Segment]":
    """Split a template into literal text and placeholder slots.

    Args:
        template: SQL text with ``?``, ``??`` and ``?fields`` placeholders.

    Returns:
        Segments in document order. Adjacent text, including the ``?`` of an
        escaped ``??``, is merged into a single :class:`Literal`.
    """
    segments: list[Segment] = []
    pending = ""
    rest = template

    while (idx := rest.find(PLACEHOLDER)) != -1:
        if rest.startswith(PLACEHOLDER, idx + 1):
            pending += rest[: idx + 1]
            rest = rest[idx + 2 :]
            continue

        pending += rest[:idx]
        if pending:
            segments.append(Literal(pending))
            pending = ""

        rest = rest[idx + 1 :]
        if rest.startswith(FIELDS_KEYWORD):
            segments.append(FIELDS_SLOT)
            rest = rest[len(FIELDS_KEYWORD) :]
        else:
            segments.append(ARGUMENT_SLOT)

    pending += rest
    if pending:
        segments.append(Literal(pending))
    return segments


@mypyc_attr(allow_interpreted_subclasses=False)
class SQLBuilder:
    """Binds values into a positional SQL template.

    Example::

        builder = SQLBuilder("SELECT ?fields FROM t WHERE a = ?")
        builder.bind_arg("foo")
        builder.bind_fields(Row)  # dataclass with fields a and b
        builder.finish()  # "SELECT `a`,`b` FROM t WHERE a = 'foo'"

    A builder is consumed by :meth:`finish`; any later call raises
    :class:`~chsql.exceptions.BuilderConsumedError`.
    """

    __slots__ = ("_finished", "_state")

    def __init__(self, template: str) -> None:
        self._state: Union[InProgress, Failed] = InProgress(parse_template(template))
        self._finished = False

    @classmethod
    def raw(cls, query: str) -> "SQLBuilder":
        """Create a builder around pre-built SQL that is never parsed.

        Args:
            query: SQL emitted unchanged by :meth:`finish`.

        Returns:
            A builder holding a single literal segment.
        """
        builder = cls("")
        builder._state = InProgress([Literal(query)])
        return builder

    @property
    def state(self) -> Union[InProgress, Failed]:
        return self._state

    @property
    def is_failed(self) -> bool:
        return isinstance(self._state, Failed)

    @property
    def error_message(self) -> Optional[str]:
        """The failure message, or None while the builder is healthy."""
        if isinstance(self._state, Failed):
            return self._state.message
        return None

    def set_output_format(self, output_format: str) -> None:
        """Append `` FORMAT <output_format>`` to the finished statement.

        Overwrites any format set before. Ignored once the builder has failed.
        """
        self._ensure_not_finished()
        if isinstance(self._state, InProgress):
            self._state.output_format = output_format

    def bind_arg(self, value: "BindValue") -> None:
        """Replace the first unbound ``?`` with the literal form of ``value``.

        Args:
            value: Any value the literal serializer can render.
        """
        self._ensure_not_finished()
        state = self._state
        if not isinstance(state, InProgress):
            return

        for index, segment in enumerate(state.segments):
            if isinstance(segment, ArgumentSlot):
                break
        else:
            self._fail("unexpected bind(), all arguments are already bound")
            return

        out = StringIO()
        try:
            write_literal(value, out)
        except SerializationError as exc:
            self._fail(f"invalid argument: {exc}")
            return
        except Exception as exc:  # noqa: BLE001
            self._fail(f"invalid argument: {type(exc).__name__}: {exc}")
            return
        state.segments[index] = Literal(out.getvalue())

    def bind_fields(self, row_type: "RowType") -> None:
        """Replace every ``?fields`` with the column list of ``row_type``.

        Args:
            row_type: Row class whose named fields become the column list.
        """
        self._ensure_not_finished()
        state = self._state
        if not isinstance(state, InProgress):
            return

        fields = join_column_names(row_type)
        if fields is not None:
            state.segments = [
                Literal(fields) if isinstance(segment, FieldsSlot) else segment for segment in state.segments
            ]
        elif any(isinstance(segment, FieldsSlot) for segment in state.segments):
            self._fail("argument ?fields cannot be used with non-struct row types")

    def finish(self) -> str:
        """Render the bound statement and consume the builder.

        Raises:
            InvalidParamsError: If the builder failed or a placeholder is unbound.

        Returns:
            The complete SQL statement, with the ``FORMAT`` clause when one was set.
        """
        self._ensure_not_finished()
        self._finished = True

        if isinstance(self._state, InProgress):
            sql = self._render(self._state)
            if sql is not None:
                logger.debug(
                    "Finished SQL statement: %s",
                    sql,
                    extra=event_fields("builder.finished", length=len(sql), output_format=self._state.output_format),
                )
                return sql

        failed = cast("Failed", self._state)
        raise InvalidParamsError(failed.message)

    def _render(self, state: InProgress) -> Optional[str]:
        """Join the segments, or fail on the first unbound slot and return None."""
        parts: list[str] = []
        for segment in state.segments:
            if isinstance(segment, Literal):
                parts.append(segment.text)
            elif isinstance(segment, ArgumentSlot):
                self._fail("unbound query argument")
                return None
            else:
                self._fail("unbound query argument ?fields")
                return None
        if state.output_format is not None:
            parts.append(f" FORMAT {state.output_format}")
        return "".join(parts)

    def __str__(self) -> str:
        state = self._state
        if isinstance(state, Failed):
            return state.message
        rendered = "".join(
            segment.text if isinstance(segment, Literal) else segment.placeholder for segment in state.segments
        )
        if state.output_format is not None:
            rendered += f" FORMAT {state.output_format}"
        return rendered

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._state!r})"

    def _fail(self, message: str) -> None:
        self._state = Failed(f"{ERROR_PREFIX}{message}")
        logger.debug(
            "SQL builder failed: %s", self._state.message, extra=event_fields("builder.failed", error=self._state.message)
        )

    def _ensure_not_finished(self) -> None:
        if self._finished:
            raise BuilderConsumedError
