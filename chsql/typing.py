"""Shared type aliases and optional-dependency flags."""

from importlib.util import find_spec
from typing import TYPE_CHECKING, Any, Union

from typing_extensions import TypeAlias

if TYPE_CHECKING:
    from chsql.protocols import Bind

__all__ = (
    "ATTRS_INSTALLED",
    "MSGSPEC_INSTALLED",
    "PYDANTIC_INSTALLED",
    "BindValue",
    "RowType",
    "dependency_installed",
)


def dependency_installed(module_name: str) -> bool:
    """Return True when ``module_name`` can be imported.

    Args:
        module_name: Top level import name of the distribution.

    Returns:
        Whether the module is importable in the current environment.
    """
    return find_spec(module_name) is not None


MSGSPEC_INSTALLED = dependency_installed("msgspec")
PYDANTIC_INSTALLED = dependency_installed("pydantic")
ATTRS_INSTALLED = dependency_installed("attrs")

RowType: TypeAlias = "type[Any]"
"""A class describing the shape of a result row (dataclass, Struct, model, ...)."""
BindValue: TypeAlias = "Union[Bind, Any]"
"""Anything the literal serializer knows how to render."""
