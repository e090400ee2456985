"""Small validation helpers for query strings and config values."""

from typing import Annotated

from pydantic import Field


__all__ = [
    "NonEmptyStr",
    "Port",
    "PositiveTimeout",
    "parse_comma_separated",
]


Port = Annotated[int, Field(ge=1, le=65535, description="TCP/UDP port number")]
PositiveTimeout = Annotated[float, Field(gt=0, description="Timeout value in seconds")]
NonEmptyStr = Annotated[str, Field(min_length=1, description="Non-empty string")]


def parse_comma_separated(
    value: str | list[str],
    strip: bool = True,
    filter_empty: bool = True,
) -> list[str]:
    """Parse comma-separated string into list of values.

    Args:
        value: Comma-separated string or list
        strip: Whether to strip whitespace from each item
        filter_empty: Whether to filter out empty strings

    Returns:
        List of parsed values
    """
    items = value if isinstance(value, list) else value.split(",")

    if strip:
        items = [item.strip() for item in items]

    if filter_empty:
        items = [item for item in items if item]

    return items
