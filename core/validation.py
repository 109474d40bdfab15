"""
Input parsing for the controller panels. Everything here runs before the
core is invoked; the core itself trusts its arguments.
"""

import re
from typing import List, Optional

from core.config import ARRAY_MAX_LENGTH, ARRAY_MIN_LENGTH, VALUE_MAX, VALUE_MIN


class ValidationError(ValueError):
    """User-facing input error raised at the panel boundary."""


def parse_value(text: str, low: int = VALUE_MIN, high: int = VALUE_MAX) -> int:
    text = (text or "").strip()
    try:
        value = int(text)
    except ValueError:
        raise ValidationError(f"Please enter a valid number between {low} and {high}") from None
    if value < low or value > high:
        raise ValidationError(f"Please enter a valid number between {low} and {high}")
    return value


def split_tokens(text: str) -> List[str]:
    if not text:
        return []
    normalized = text.replace("，", ",")
    return [part.strip() for part in re.split(r"[,\s]+", normalized) if part.strip()]


def parse_sequence(text: str) -> List[int]:
    """Parse a comma/space separated integer list, skipping junk tokens."""
    values = []
    for token in split_tokens(text):
        try:
            values.append(int(token))
        except ValueError:
            continue
    return values


def parse_array(
    text: str,
    min_length: int = ARRAY_MIN_LENGTH,
    max_length: int = ARRAY_MAX_LENGTH,
    low: Optional[int] = None,
    high: Optional[int] = None,
) -> List[int]:
    values = parse_sequence(text)
    if low is not None and high is not None:
        if any(value < low or value > high for value in values):
            raise ValidationError(f"Please enter numbers between {low} and {high}")
    if len(values) < min_length:
        raise ValidationError("Please enter valid numbers")
    if len(values) > max_length:
        raise ValidationError(f"Maximum {max_length} elements allowed")
    return values
