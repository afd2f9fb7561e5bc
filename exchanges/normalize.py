"""
Helpers shared by the per-exchange response normalizers.
"""

from __future__ import annotations

import math
from typing import Any, List, Mapping, Tuple

from exchanges.errors import InvalidDataError
from exchanges.schemas import Offer


def require_mapping(value: Any, context: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise InvalidDataError(f"Expected an object for {context}, got {type(value).__name__}", payload=value)
    return value


def require_field(data: Mapping[str, Any], key: str, context: str) -> Any:
    try:
        return data[key]
    except KeyError as exc:
        raise InvalidDataError(f"Missing field '{key}' in {context}", payload=dict(data)) from exc


def to_float(value: Any, field: str) -> float:
    """Parse a numeric field that may arrive as a JSON number or a string."""
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise InvalidDataError(f"Field '{field}' is not numeric: {value!r}")
    try:
        number = float(value)
    except ValueError as exc:
        raise InvalidDataError(f"Field '{field}' is not numeric: {value!r}") from exc
    if not math.isfinite(number):
        raise InvalidDataError(f"Field '{field}' is not a finite number: {value!r}")
    return number


def parse_offers(rows: Any, side: str) -> Tuple[Offer, ...]:
    """Convert ``[[price, volume, ...], ...]`` positionally, keeping the source order."""
    if not isinstance(rows, list):
        raise InvalidDataError(f"Expected a list of {side}, got {type(rows).__name__}")
    offers: List[Offer] = []
    for index, row in enumerate(rows):
        if not isinstance(row, (list, tuple)) or len(row) < 2:
            raise InvalidDataError(f"Malformed {side} entry at index {index}: {row!r}")
        offers.append((to_float(row[0], f"{side}[{index}].price"), to_float(row[1], f"{side}[{index}].volume")))
    return tuple(offers)


def flatten_messages(reason: Any) -> List[str]:
    """Turn an error reason (string, list or field->messages dict) into a flat list."""
    if reason is None:
        return []
    if isinstance(reason, str):
        return [reason]
    if isinstance(reason, (list, tuple)):
        messages: List[str] = []
        for item in reason:
            messages.extend(flatten_messages(item))
        return messages
    if isinstance(reason, Mapping):
        messages = []
        for key, value in reason.items():
            for message in flatten_messages(value):
                messages.append(message if key == "__all__" else f"{key}: {message}")
        return messages
    return [str(reason)]
