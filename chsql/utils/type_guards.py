"""Type guards for the row types accepted by ``?fields`` binding.

All checks operate on classes, not instances: the builder only ever sees the
row type a caller intends to decode into.
"""

from typing import TYPE_CHECKING, Any, cast

from chsql.protocols import Bind
from chsql.typing import ATTRS_INSTALLED, MSGSPEC_INSTALLED, PYDANTIC_INSTALLED

if TYPE_CHECKING:
    from typing_extensions import TypeGuard

__all__ = (
    "has_column_names",
    "is_attrs_class",
    "is_bindable",
    "is_dataclass_type",
    "is_msgspec_struct_type",
    "is_namedtuple_type",
    "is_pydantic_model_type",
    "is_typeddict_type",
)


def is_bindable(value: Any) -> "TypeGuard[Bind]":
    """Check if a value renders itself through the :class:`~chsql.protocols.Bind` protocol.

    Classes are rejected even if they define ``write_sql``; only instances bind.

    Args:
        value: The value to check

    Returns:
        True if ``value`` is an instance implementing ``write_sql``.
    """
    return not isinstance(value, type) and isinstance(value, Bind)


def has_column_names(row_type: Any) -> bool:
    """Check if a class declares ``__column_names__`` explicitly."""
    return isinstance(row_type, type) and hasattr(row_type, "__column_names__")


def is_dataclass_type(row_type: Any) -> bool:
    return isinstance(row_type, type) and hasattr(row_type, "__dataclass_fields__")


def is_namedtuple_type(row_type: Any) -> bool:
    """Check if a class was built by ``collections.namedtuple`` or ``typing.NamedTuple``.

    Args:
        row_type: Class to check.

    Returns:
        True for tuple subclasses exposing ``_fields``.
    """
    return isinstance(row_type, type) and issubclass(row_type, tuple) and hasattr(row_type, "_fields")


def is_typeddict_type(row_type: Any) -> bool:
    """Check if a class is a ``TypedDict``.

    ``TypedDict`` classes are plain ``dict`` subclasses at runtime that carry
    ``__required_keys__`` alongside their annotations.
    """
    return (
        isinstance(row_type, type)
        and issubclass(row_type, dict)
        and hasattr(row_type, "__required_keys__")
        and hasattr(row_type, "__annotations__")
    )


def is_msgspec_struct_type(row_type: Any) -> bool:
    """Check if a class is a ``msgspec.Struct`` subclass.

    Args:
        row_type: Class to check.

    Returns:
        False when msgspec is not installed.
    """
    if not MSGSPEC_INSTALLED or not isinstance(row_type, type):
        return False
    import msgspec

    return issubclass(row_type, msgspec.Struct)


def is_pydantic_model_type(row_type: Any) -> bool:
    """Check if a class is a pydantic ``BaseModel`` subclass.

    Args:
        row_type: Class to check.

    Returns:
        False when pydantic is not installed.
    """
    if not PYDANTIC_INSTALLED or not isinstance(row_type, type):
        return False
    from pydantic import BaseModel

    return issubclass(cast("type[Any]", row_type), BaseModel)


def is_attrs_class(row_type: Any) -> bool:
    """Check if a class was decorated with ``attrs.define`` (or the classic ``attr.s``)."""
    if not ATTRS_INSTALLED or not isinstance(row_type, type):
        return False
    import attrs

    return attrs.has(row_type)
