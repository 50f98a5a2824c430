"""
Ingredient quantities for a chosen serving size.
"""

import math
from typing import Dict, Optional

FRACTIONS = {
    0.25: "¼",
    0.5: "½",
    0.75: "¾",
    0.33: "⅓",
    0.67: "⅔",
}


def ingredient_quantity(
    quantities_by_servings: Dict[str, float], serving_size: int, default_serving: int
) -> Optional[float]:
    """Exact quantity for `serving_size`, else scaled linearly from the default serving."""
    exact = quantities_by_servings.get(str(serving_size))
    if exact is not None:
        return exact
    default_quantity = quantities_by_servings.get(str(default_serving))
    if default_quantity is not None:
        return default_quantity / default_serving * serving_size
    return None


def format_quantity(quantity: Optional[float]) -> str:
    if quantity is None:
        return ""
    whole = math.floor(quantity)
    fraction = math.floor((quantity - whole) * 100 + 0.5) / 100
    if fraction == 0:
        return str(whole)
    if fraction in FRACTIONS:
        return f"{whole} {FRACTIONS[fraction]}" if whole > 0 else FRACTIONS[fraction]
    text = f"{quantity:.1f}"
    return text[:-2] if text.endswith(".0") else text
