"""
Humanization options: allowed values, defaults and clamping.

Invalid or out-of-range values are never an error. They are replaced by
the default so a sloppy client still gets a rewrite.
"""

from typing import Any, Optional

from ..models.schemas import HumanizationOptions


READABILITY_LEVELS = ("High School", "University", "Doctorate", "Journalist", "Marketing")
PURPOSES = ("General Writing", "Academic", "Business", "Creative", "Technical")

DEFAULT_READABILITY = "University"
DEFAULT_PURPOSE = "General Writing"
DEFAULT_STRENGTH = 0.9

MIN_STRENGTH = 0.1
MAX_STRENGTH = 0.9


def normalize_readability(value: Any) -> str:
    if isinstance(value, str) and value in READABILITY_LEVELS:
        return value
    return DEFAULT_READABILITY


def normalize_purpose(value: Any) -> str:
    if isinstance(value, str) and value in PURPOSES:
        return value
    return DEFAULT_PURPOSE


def normalize_strength(value: Any) -> float:
    """Accepts floats or numeric strings ("0.5"). Anything else -> default."""
    if isinstance(value, bool) or value is None:
        return DEFAULT_STRENGTH
    try:
        strength = float(value)
    except (TypeError, ValueError):
        return DEFAULT_STRENGTH
    if strength != strength:  # NaN
        return DEFAULT_STRENGTH
    if strength < MIN_STRENGTH or strength > MAX_STRENGTH:
        return DEFAULT_STRENGTH
    return strength


def strength_band(strength: float) -> str:
    """Bucket a clamped strength into low / medium / high (cuts at 0.3 and 0.6)."""
    if strength < 0.3:
        return "low"
    if strength < 0.6:
        return "medium"
    return "high"


def normalize_options(
    readability: Optional[Any] = None,
    purpose: Optional[Any] = None,
    strength: Optional[Any] = None,
) -> HumanizationOptions:
    return HumanizationOptions(
        readability=normalize_readability(readability),
        purpose=normalize_purpose(purpose),
        strength=normalize_strength(strength),
    )
