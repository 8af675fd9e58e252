"""Fluent query construction on top of :class:`~chsql.sql.SQLBuilder`."""

from typing import TYPE_CHECKING, Optional

from chsql.config import QueryConfig, get_default_config
from chsql.exceptions import InvalidParamsError
from chsql.sql.builder import SQLBuilder
from chsql.utils.logging import event_fields, get_logger

if TYPE_CHECKING:
    from chsql.typing import BindValue, RowType

__all__ = ("Query",)

logger = get_logger("query")


class Query:
    """A SQL statement under construction.

    Binding methods return the query itself so calls can be chained::

        sql = Query("SELECT ?fields FROM events WHERE id IN ?").bind([1, 2]).bind_fields(Event).sql

    The statement is rendered once, on first access to :attr:`sql`; later
    accesses return the same string or raise the same error.
    """

    __slots__ = ("_builder", "_config", "_error", "_sql")

    def __init__(self, template: str, config: Optional[QueryConfig] = None) -> None:
        self._config = config or get_default_config()
        self._builder = SQLBuilder(template)
        self._sql: Optional[str] = None
        self._error: Optional[InvalidParamsError] = None
        if self._config.default_output_format is not None:
            self._builder.set_output_format(self._config.default_output_format)

    @classmethod
    def raw(cls, sql: str, config: Optional[QueryConfig] = None) -> "Query":
        """Wrap pre-built SQL; placeholders in it are not interpreted."""
        query = cls("", config)
        query._builder = SQLBuilder.raw(sql)
        if query._config.default_output_format is not None:
            query._builder.set_output_format(query._config.default_output_format)
        return query

    @property
    def config(self) -> QueryConfig:
        return self._config

    def bind(self, value: "BindValue") -> "Query":
        """Bind ``value`` to the next ``?`` placeholder.

        Args:
            value: Value rendered as a SQL literal.

        Returns:
            This query.
        """
        self._builder.bind_arg(value)
        return self

    def bind_fields(self, row_type: "RowType") -> "Query":
        """Bind the column list of ``row_type`` to every ``?fields`` placeholder."""
        self._builder.bind_fields(row_type)
        return self

    def with_format(self, output_format: str) -> "Query":
        """Request the result in ``output_format`` (``JSONEachRow``, ``RowBinary``, ...)."""
        self._builder.set_output_format(output_format)
        return self

    @property
    def sql(self) -> str:
        """The finished statement.

        Raises:
            InvalidParamsError: If the template could not be fully bound.
        """
        if self._error is not None:
            raise self._error
        if self._sql is None:
            try:
                self._sql = self._builder.finish()
            except InvalidParamsError as exc:
                if self._config.log_failures:
                    logger.warning("Failed to build query: %s", exc, extra=event_fields("query.failed", error=str(exc)))
                self._error = exc
                raise
        return self._sql

    def __str__(self) -> str:
        if self._sql is not None:
            return self._sql
        return str(self._builder)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self)!r})"
