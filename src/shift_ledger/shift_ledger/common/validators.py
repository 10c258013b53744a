from __future__ import annotations

from typing import Iterable

from ..core.exceptions import ValidationError


def require_slot(slot: int, allowed: Iterable[int]) -> int:
    try:
        slot = int(slot)
    except (TypeError, ValueError):
        raise ValidationError("Slot must be a number")
    if slot not in tuple(allowed):
        raise ValidationError(f"Slot {slot} is not available for this position")
    return slot


def require_non_negative(value: int, field_name: str) -> int:
    try:
        value = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if value < 0:
        raise ValidationError(f"{field_name} must not be negative")
    return value
