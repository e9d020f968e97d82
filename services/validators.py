"""Single-field predicates used by the document schemas.

Every optional validator treats a missing key and an explicit null the same way:
callers read fields with ``dict.get`` so both arrive here as ``None``.
"""
import math
from enum import Enum
from typing import Any, Iterable, Optional

from models.document import parse_timestamp_like


def is_absent(value: Any) -> bool:
    return value is None


def is_number(value: Any) -> bool:
    # bool is an int subclass but never a valid number in a document
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and math.isfinite(value)


def is_bool(value: Any) -> bool:
    return isinstance(value, bool)


def is_map(value: Any) -> bool:
    return isinstance(value, dict)


def integer(value: Any) -> bool:
    if not is_number(value):
        return False
    return isinstance(value, int) or float(value).is_integer()


def optional_integer(value: Any) -> bool:
    return is_absent(value) or integer(value)


def bounded_string(value: Any, max_length: int) -> bool:
    return isinstance(value, str) and 0 < len(value) <= max_length


def optional_bounded_string(value: Any, max_length: int) -> bool:
    # unlike bounded_string, the empty string is accepted
    return is_absent(value) or (isinstance(value, str) and len(value) <= max_length)


def non_negative_number(value: Any) -> bool:
    return is_number(value) and value >= 0


def optional_non_negative_number(value: Any) -> bool:
    return is_absent(value) or non_negative_number(value)


def number_in_range(value: Any, low: float, high: float) -> bool:
    return is_number(value) and low <= value <= high


def optional_number_in_range(value: Any, low: float, high: float) -> bool:
    return is_absent(value) or number_in_range(value, low, high)


def timestamp_like(value: Any) -> bool:
    try:
        parse_timestamp_like(value)
    except ValueError:
        return False
    return True


def bounded_list(value: Any, max_length: int) -> bool:
    return is_absent(value) or (isinstance(value, list) and len(value) <= max_length)


def string_list(value: Any, max_length: Optional[int] = None) -> bool:
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        return False
    return max_length is None or len(value) <= max_length


def enum_member(value: Any, allowed: Iterable[str], optional: bool = False) -> bool:
    if is_absent(value):
        return optional
    if isinstance(value, Enum):
        value = value.value
    return isinstance(value, str) and value in set(allowed)


def enum_values(enum_cls) -> frozenset:
    return frozenset(member.value for member in enum_cls)
