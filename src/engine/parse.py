# lenient parsing of values typed into the UI
import math
from typing import Optional


def to_int(val) -> Optional[int]:
    """Whole number from an int, integral float or numeric string; else None."""
    if isinstance(val, bool):
        return None
    if isinstance(val, float):
        return int(val) if val.is_integer() else None
    if isinstance(val, str):
        val = val.strip()
    try:
        return int(val)
    except (TypeError, ValueError):
        num = to_float(val)
        if num is not None and num.is_integer():
            return int(num)
        return None


def to_float(val) -> Optional[float]:
    if isinstance(val, bool):
        return None
    if isinstance(val, str):
        val = val.strip()
    try:
        num = float(val)
    except (TypeError, ValueError):
        return None
    return num if math.isfinite(num) else None
