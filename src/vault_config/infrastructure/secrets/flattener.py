"""Secret tree flattening.

Converts the nested structure stored at a KV v2 path into flat configuration
keys, using ``:`` as the hierarchy separator and list indexes as segments:

    {"Database": {"Hosts": ["a", "b"], "Port": 5432, "Ssl": True}}
    -> {"Database:Hosts:0": "a", "Database:Hosts:1": "b",
        "Database:Port": "5432", "Database:Ssl": "true"}

Value rules:
    - str: unchanged
    - bool: "true" / "false"
    - int / float: str()
    - None: kept as an explicit None value under its key

JSON strings:
    hvac already returns nested JSON as dicts and lists. Values written as
    serialized JSON text are decoded only at the top level of the tree (a
    secret whose whole value is "{...}" or "[...]"). Strings nested inside
    structures are never decoded, and text that fails to parse is kept as is.
"""

import json
from collections.abc import Mapping
from typing import Any

SEPARATOR = ":"


def decode_top_level_value(value: Any) -> Any:
    """Decode a top-level secret value that holds serialized JSON.

    Args:
        value: Raw top-level value.

    Returns:
        The parsed object when ``value`` is a string shaped like a JSON object
        or array that parses; otherwise ``value`` unchanged.
    """
    if not isinstance(value, str):
        return value

    text = value.strip()
    if not (
        (text.startswith("{") and text.endswith("}"))
        or (text.startswith("[") and text.endswith("]"))
    ):
        return value

    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return value


def _to_config_value(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    return str(value)


def _flatten_into(value: Any, key: str, result: dict[str, str | None]) -> None:
    if isinstance(value, Mapping):
        for child, child_value in value.items():
            _flatten_into(child_value, f"{key}{SEPARATOR}{child}", result)
    elif isinstance(value, (list, tuple)):
        for index, item in enumerate(value):
            _flatten_into(item, f"{key}{SEPARATOR}{index}", result)
    else:
        result[key] = _to_config_value(value)


def flatten_secrets(
    tree: Mapping[str, Any], prefix: str | None = None
) -> dict[str, str | None]:
    """Flatten a secret tree into colon-delimited configuration keys.

    Args:
        tree: Secret data as returned by a KV v2 read.
        prefix: Optional section prepended to every key ("Vault" ->
            "Vault:Database:Password").

    Returns:
        New dict of flattened keys to string (or None) values. Empty input
        gives an empty dict. Empty nested maps and lists produce no keys.

    Example:
        >>> flatten_secrets({"a": {"b": {"c": "v"}}})
        {'a:b:c': 'v'}
        >>> flatten_secrets({"a": [1, 2, {"x": "y"}]})
        {'a:0': '1', 'a:1': '2', 'a:2:x': 'y'}
    """
    prefix = prefix.strip() if prefix else None
    result: dict[str, str | None] = {}

    for key, value in tree.items():
        child_key = f"{prefix}{SEPARATOR}{key}" if prefix else str(key)
        _flatten_into(decode_top_level_value(value), child_key, result)

    return result
