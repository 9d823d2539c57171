"""Shared serialization utilities for loans and published payloads."""

import json
from dataclasses import asdict, is_dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any


def to_dict(obj: Any) -> dict:
    """Convert a dataclass or dict to a JSON-ready dictionary.

    Raises ``TypeError`` for anything else.
    """
    if is_dataclass(obj) and not isinstance(obj, type):
        return dataclass_to_dict(obj)
    elif isinstance(obj, dict):
        return {key: serialize_value(value) for key, value in obj.items()}
    raise TypeError(f"Cannot convert {type(obj).__name__} to a payload dict")


def dataclass_to_dict(obj: Any) -> dict:
    """Convert dataclass to dict with proper serialization."""
    result = {}
    for key, value in asdict(obj).items():
        result[key] = serialize_value(value)
    return result


def to_json_bytes(obj: Any) -> bytes:
    """Encode a dataclass or dict as UTF-8 JSON.

    Raises ``TypeError``/``ValueError`` when a value cannot be represented.
    """
    return json.dumps(to_dict(obj), ensure_ascii=False, allow_nan=False).encode("utf-8")


def serialize_value(value: Any) -> Any:
    """Serialize a value for JSON output."""
    if isinstance(value, Decimal):
        return str(value)
    elif isinstance(value, Enum):
        return value.value
    elif isinstance(value, datetime):
        return value.isoformat()
    elif isinstance(value, date):
        return value.isoformat()
    elif isinstance(value, dict):
        return {k: serialize_value(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [serialize_value(v) for v in value]
    return value
