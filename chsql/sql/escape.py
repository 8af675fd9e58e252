"""Quoting routines for ClickHouse string literals and identifiers.

Both forms escape with a backslash: the quote character itself and the
backslash are the only characters that change.
"""

from io import StringIO
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from chsql.protocols import SupportsWrite

__all__ = ("escape_identifier", "escape_string", "quote_identifier", "write_quoted")

_BACKSLASH = "\\"


def write_quoted(src: str, out: "SupportsWrite", quote: str) -> None:
    """Write ``src`` wrapped in ``quote`` with ``quote`` and backslash escaped.

    Args:
        src: Raw text.
        out: Buffer receiving the quoted text.
        quote: Single quote for strings, backtick for identifiers.
    """
    out.write(quote)
    out.write(src.replace(_BACKSLASH, _BACKSLASH * 2).replace(quote, _BACKSLASH + quote))
    out.write(quote)


def escape_string(src: str, out: "SupportsWrite") -> None:
    write_quoted(src, out, "'")


def escape_identifier(src: str, out: "SupportsWrite") -> None:
    write_quoted(src, out, "`")


def quote_identifier(src: str) -> str:
    """Return ``src`` as a backtick-quoted identifier."""
    out = StringIO()
    escape_identifier(src, out)
    return out.getvalue()
