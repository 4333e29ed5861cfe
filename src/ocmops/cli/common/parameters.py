"""Query parameter parsing for raw API requests."""

from typing import Iterable


def parse_parameters(values: Iterable[str]) -> list[tuple[str, str]]:
    """
    Turn `name=value` strings into query parameter pairs.

    Repeated names are kept, in order, so they are sent as repeated
    parameters.

    Raises:
        ValueError: If an entry has no `=` or an empty name.
    """
    params: list[tuple[str, str]] = []
    for raw in values:
        if "=" not in raw:
            raise ValueError(f"Invalid parameter '{raw}' (expected name=value)")
        name, value = raw.split("=", 1)
        name = name.strip()
        if not name:
            raise ValueError(f"Invalid parameter '{raw}' (empty name)")
        params.append((name, value))
    return params
