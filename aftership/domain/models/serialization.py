"""Conversion between domain dataclasses and AfterShip JSON.

Field names equal JSON keys, so decoding walks the dataclass fields and
looks each one up in the payload. Unknown keys are ignored. Encoding drops
None values so that only what the caller set is sent.
"""

import dataclasses
import enum
import logging
import typing
from datetime import datetime, date
from typing import Any, Dict, List, Optional, Type, TypeVar, Union

logger = logging.getLogger(__name__)

T = TypeVar("T")

_hints_cache: Dict[type, Dict[str, Any]] = {}


def _field_types(cls: type) -> Dict[str, Any]:
    """Resolved type hints for a dataclass, cached per class."""
    hints = _hints_cache.get(cls)
    if hints is None:
        hints = typing.get_type_hints(cls)
        _hints_cache[cls] = hints
    return hints


def parse_datetime(value: Any) -> Optional[datetime]:
    """Parses an ISO 8601 timestamp as returned by the API."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value))
    except ValueError:
        logger.warning(f"Unparseable timestamp from API: {value!r}")
        return None


def _decode_value(tp: Any, value: Any) -> Any:
    if value is None:
        return None

    origin = typing.get_origin(tp)
    if origin is Union:
        args = [a for a in typing.get_args(tp) if a is not type(None)]
        # Optional[X] is the only union used by the models
        return _decode_value(args[0], value) if args else value
    if origin in (list, List):
        (item_type,) = typing.get_args(tp) or (Any,)
        return [_decode_value(item_type, item) for item in value]
    if origin in (dict, Dict):
        args = typing.get_args(tp)
        item_type = args[1] if len(args) == 2 else Any
        return {k: _decode_value(item_type, v) for k, v in value.items()}

    if tp is Any:
        return value
    if dataclasses.is_dataclass(tp) and isinstance(value, dict):
        return from_dict(tp, value)
    if tp is datetime:
        return parse_datetime(value)
    if isinstance(tp, type) and issubclass(tp, enum.Enum):
        try:
            return tp(value)
        except ValueError:
            logger.debug(f"Unknown {tp.__name__} value {value!r}; keeping raw value")
            return value
    if tp is float and isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    return value


def from_dict(cls: Type[T], data: Optional[Dict[str, Any]]) -> T:
    """Builds a dataclass instance from a JSON object.

    Args:
        cls: The dataclass to build.
        data: The decoded JSON object. None or empty yields an empty instance.

    Returns:
        An instance of `cls` with every known key decoded.
    """
    if not data:
        return cls()
    hints = _field_types(cls)
    kwargs = {}
    for field in dataclasses.fields(cls):
        if field.name in data:
            kwargs[field.name] = _decode_value(hints[field.name], data[field.name])
    return cls(**kwargs)


def _encode_value(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return to_dict(value)
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: _encode_value(v) for k, v in value.items() if v is not None}
    if isinstance(value, (list, tuple)):
        return [_encode_value(v) for v in value]
    return value


def to_dict(obj: Any) -> Dict[str, Any]:
    """Encodes a dataclass (or plain dict) as a JSON-ready dict, dropping None fields."""
    if obj is None:
        return {}
    if isinstance(obj, dict):
        return _encode_value(obj)
    result: Dict[str, Any] = {}
    for field in dataclasses.fields(obj):
        value = getattr(obj, field.name)
        if value is None:
            continue
        result[field.name] = _encode_value(value)
    return result


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, enum.Enum):
        return str(value.value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (list, tuple, set)):
        return ",".join(_query_value(v) for v in value)
    return str(value)


def to_query(params: Any) -> Dict[str, str]:
    """Serializes parameters for a URL query string.

    None values are dropped, lists are joined with commas and booleans
    become 'true' / 'false'.
    """
    if params is None:
        return {}
    items = params.items() if isinstance(params, dict) else (
        (f.name, getattr(params, f.name)) for f in dataclasses.fields(params)
    )
    return {key: _query_value(value) for key, value in items if value is not None}
