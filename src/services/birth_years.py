"""Birth year ("NN년생") extraction for the fortune viewer."""

import random
import re
from typing import Optional, Union

from src.models.schemas import BirthYearOrder

BIRTH_YEAR_PATTERN = re.compile(r"(\d{2,4})년생")
BIRTH_YEAR_SUFFIX = "년생"


def extract_birth_years(script: str) -> list[str]:
    """Return the unique "NN년생" tokens of a script in order of appearance."""
    seen = []
    for match in BIRTH_YEAR_PATTERN.finditer(script or ""):
        token = match.group(0)
        if token not in seen:
            seen.append(token)
    return seen


def normalize_year(value: Union[str, int]) -> int:
    """
    Map a birth year token or number to a four digit year.

    Two digit years 00-30 belong to the 2000s, 31-99 to the 1900s.
    Three and four digit years are returned unchanged.
    """
    if isinstance(value, str):
        value = int(value.replace(BIRTH_YEAR_SUFFIX, "").strip())
    if value < 100:
        return 2000 + value if value <= 30 else 1900 + value
    return value


def order_birth_years(tokens: list[str], order: BirthYearOrder) -> list[str]:
    if order == BirthYearOrder.CHRONOLOGICAL:
        # sorted() is stable, so "05년생" / "2005년생" keep script order
        return sorted(tokens, key=normalize_year)
    return list(tokens)


def birth_years_for_display(
    script: str,
    order: BirthYearOrder = BirthYearOrder.CHRONOLOGICAL,
) -> list[str]:
    return order_birth_years(extract_birth_years(script), order)


def floating_offsets(
    count: int,
    max_offset: float = 6.0,
    seed: Optional[int] = None,
) -> list[tuple[float, float]]:
    """Random (x, y) pixel offsets for the floating birth year effect."""
    rng = random.Random(seed)
    return [
        (round(rng.uniform(-max_offset, max_offset), 1),
         round(rng.uniform(-max_offset, max_offset), 1))
        for _ in range(count)
    ]
