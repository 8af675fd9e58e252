"""chsql: injection-safe SQL templating for ClickHouse."""

from chsql import exceptions, row, sql, typing, utils
from chsql.__metadata__ import __version__
from chsql.config import QueryConfig
from chsql.exceptions import (
    BuilderConsumedError,
    ChSQLError,
    InvalidParamsError,
    SerializationError,
)
from chsql.protocols import Bind, Row
from chsql.query import Query
from chsql.row import column_names, join_column_names
from chsql.sql.bind import Identifier, register_literal_writer, render_literal
from chsql.sql.builder import SQLBuilder

__all__ = (
    "Bind",
    "BuilderConsumedError",
    "ChSQLError",
    "Identifier",
    "InvalidParamsError",
    "Query",
    "QueryConfig",
    "Row",
    "SQLBuilder",
    "SerializationError",
    "__version__",
    "column_names",
    "exceptions",
    "join_column_names",
    "register_literal_writer",
    "render_literal",
    "row",
    "sql",
    "typing",
    "utils",
)
