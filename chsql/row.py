"""Column names of row types, as consumed by ``?fields`` placeholders.

A row type with named fields yields its columns as one backtick-quoted,
comma-joined string. Types without named fields, such as plain
tuples or scalars, yield ``None``.
"""

from collections.abc import Sequence
from functools import lru_cache
from typing import Any, Callable, Optional

from chsql.sql.escape import quote_identifier
from chsql.utils.logging import get_logger
from chsql.utils.type_guards import (
    has_column_names,
    is_attrs_class,
    is_dataclass_type,
    is_msgspec_struct_type,
    is_namedtuple_type,
    is_pydantic_model_type,
    is_typeddict_type,
)

__all__ = ("column_names", "join_column_names")

logger = get_logger("row")


def _explicit_columns(row_type: Any) -> "Sequence[str]":
    return tuple(row_type.__column_names__)


def _dataclass_columns(row_type: Any) -> "Sequence[str]":
    from dataclasses import fields

    return tuple(field.name for field in fields(row_type))


def _namedtuple_columns(row_type: Any) -> "Sequence[str]":
    return tuple(row_type._fields)


def _typeddict_columns(row_type: Any) -> "Sequence[str]":
    """Keys come from the raw annotations; forward references are never evaluated."""
    return tuple(row_type.__annotations__)


def _msgspec_columns(row_type: Any) -> "Sequence[str]":
    """Struct columns use the encoded names, so ``rename=`` is honoured."""
    from msgspec.structs import fields

    return tuple(field.encode_name for field in fields(row_type))


def _pydantic_columns(row_type: Any) -> "Sequence[str]":
    """Model columns use the serialization alias when one is set."""
    columns = []
    for name, field in row_type.model_fields.items():
        alias = field.serialization_alias or field.alias
        columns.append(alias if isinstance(alias, str) else name)
    return tuple(columns)


def _attrs_columns(row_type: Any) -> "Sequence[str]":
    import attrs

    return tuple(field.name for field in attrs.fields(row_type))


@lru_cache(maxsize=256)
def _detect_row_kind(row_type: Any) -> "str | None":
    """Detect the row kind with LRU caching.

    Args:
        row_type: Type to detect

    Returns:
        Row kind identifier or None for types without named fields
    """
    return (
        "explicit"
        if has_column_names(row_type)
        else "dataclass"
        if is_dataclass_type(row_type)
        else "msgspec"
        if is_msgspec_struct_type(row_type)
        else "pydantic"
        if is_pydantic_model_type(row_type)
        else "attrs"
        if is_attrs_class(row_type)
        else "namedtuple"
        if is_namedtuple_type(row_type)
        else "typed_dict"
        if is_typeddict_type(row_type)
        else None
    )


_COLUMN_EXTRACTORS: "dict[str, Callable[[Any], Sequence[str]]]" = {
    "explicit": _explicit_columns,
    "dataclass": _dataclass_columns,
    "msgspec": _msgspec_columns,
    "pydantic": _pydantic_columns,
    "attrs": _attrs_columns,
    "namedtuple": _namedtuple_columns,
    "typed_dict": _typeddict_columns,
}


def column_names(row_type: Any) -> "Optional[tuple[str, ...]]":
    """Return the column names of ``row_type``.

    Args:
        row_type: Row class (dataclass, ``msgspec.Struct``, pydantic model,
            attrs class, ``NamedTuple``, ``TypedDict`` or a class defining
            ``__column_names__``).

    Returns:
        Column names in declaration order, or None when the type has no named fields.
    """
    if not isinstance(row_type, type):
        return None
    kind = _detect_row_kind(row_type)
    if kind is None:
        return None
    return tuple(_COLUMN_EXTRACTORS[kind](row_type))


def join_column_names(row_type: Any) -> Optional[str]:
    """Return the ``?fields`` replacement for ``row_type``.

    Args:
        row_type: Row class.

    Returns:
        Backtick-quoted, comma-joined column names, or None when the type has
        no named fields.
    """
    if not isinstance(row_type, type):
        return None
    return _join_column_names(row_type)


@lru_cache(maxsize=256)
def _join_column_names(row_type: type) -> Optional[str]:
    names = column_names(row_type)
    if names is None:
        logger.debug("Row type %r has no named fields", row_type)
        return None
    return ",".join(quote_identifier(name) for name in names)
