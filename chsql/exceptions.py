from typing import Any, Optional

__all__ = (
    "BuilderConsumedError",
    "ChSQLError",
    "InvalidParamsError",
    "SerializationError",
)


class ChSQLError(Exception):
    """Base exception class from which all chsql exceptions inherit."""

    detail: str

    def __init__(self, *args: Any, detail: str = "") -> None:
        """Initialize ``ChSQLError``.

        Args:
            *args: args are converted to :class:`str` before passing to :class:`Exception`
            detail: detail of the exception.
        """
        str_args = [str(arg) for arg in args if arg]
        if not detail:
            if str_args:
                detail, *str_args = str_args
            elif hasattr(self, "detail"):
                detail = self.detail
        self.detail = detail
        super().__init__(*str_args)

    def __repr__(self) -> str:
        if self.detail:
            return f"{self.__class__.__name__} - {self.detail}"
        return self.__class__.__name__

    def __str__(self) -> str:
        return " ".join((*self.args, self.detail)).strip()


class InvalidParamsError(ChSQLError):
    """A query template could not be turned into a complete SQL statement.

    Raised by :meth:`chsql.sql.builder.SQLBuilder.finish` for unbound placeholders,
    surplus arguments, incompatible ``?fields`` rows and values that failed
    to serialize.
    """

    def __init__(self, message: Optional[str] = None) -> None:
        if message is None:
            message = "invalid SQL"
        super().__init__(message)


class SerializationError(ChSQLError):
    """A value could not be rendered as a SQL literal."""

    value_type: Optional[type]

    def __init__(self, message: str, value_type: Optional[type] = None) -> None:
        super().__init__(detail=message)
        self.value_type = value_type


class BuilderConsumedError(ChSQLError):
    """A builder was used after ``finish()`` consumed it."""

    def __init__(self, message: Optional[str] = None) -> None:
        if message is None:
            message = "SQL builder has already been finished"
        super().__init__(message)
