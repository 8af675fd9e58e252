"""Configuration for :class:`~chsql.query.Query`."""

from typing import Any, Final, Optional

__all__ = ("QUERY_CONFIG_SLOTS", "QueryConfig", "get_default_config")

QUERY_CONFIG_SLOTS: Final = ("default_output_format", "log_failures")


class QueryConfig:
    """Settings applied to every query built with this configuration.

    Args:
        default_output_format: ``FORMAT`` clause appended unless a query sets its own.
        log_failures: Log a warning when a query fails to build.
    """

    __slots__ = QUERY_CONFIG_SLOTS

    def __init__(self, default_output_format: Optional[str] = None, log_failures: bool = True) -> None:
        self.default_output_format = default_output_format
        self.log_failures = log_failures

    def replace(self, **kwargs: Any) -> "QueryConfig":
        """Return a copy with the given attributes changed.

        Args:
            **kwargs: Attributes to update

        Raises:
            TypeError: If an attribute is not a configuration field.

        Returns:
            New QueryConfig instance with updated attributes
        """
        for key in kwargs:
            if key not in QUERY_CONFIG_SLOTS:
                msg = f"{key!r} is not a field in {type(self).__name__}"
                raise TypeError(msg)

        current_kwargs = {slot: getattr(self, slot) for slot in QUERY_CONFIG_SLOTS}
        current_kwargs.update(kwargs)
        return type(self)(**current_kwargs)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, type(self)):
            return False
        return all(getattr(self, slot) == getattr(other, slot) for slot in QUERY_CONFIG_SLOTS)

    def __hash__(self) -> int:
        return hash(tuple(getattr(self, slot) for slot in QUERY_CONFIG_SLOTS))

    def __repr__(self) -> str:
        field_strs = [f"{slot}={getattr(self, slot)!r}" for slot in QUERY_CONFIG_SLOTS]
        return f"{self.__class__.__name__}({', '.join(field_strs)})"


def get_default_config() -> QueryConfig:
    return QueryConfig()
