"""
Numeric and grouping helpers shared by the analytics calculators.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Callable, Dict, Hashable, Iterable, List, TypeVar

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)


def round_half_up(value: float, decimals: int = 2) -> float:
    """Round half away from zero, e.g. 66.665 -> 66.67 (plain round() would give 66.66)."""
    quantum = Decimal(1).scaleb(-decimals)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def percentage(numerator: float, denominator: float) -> float:
    """numerator / denominator * 100 rounded to 2 decimals, 0 when the denominator is 0."""
    if denominator == 0:
        return 0.0
    return round_half_up(numerator / denominator * 100, 2)


def safe_mean(values: List[float]) -> float:
    if not values:
        return 0.0
    return round_half_up(sum(values) / len(values), 2)


def group_by(items: Iterable[T], key: Callable[[T], K]) -> Dict[K, List[T]]:
    """Group items by key, keeping first-encountered key order."""
    groups: Dict[K, List[T]] = {}
    for item in items:
        groups.setdefault(key(item), []).append(item)
    return groups


def first_max(items: Iterable[T], key: Callable[[T], float]):
    """Item with the largest key; on ties the first one wins. None for no items."""
    best = None
    for item in items:
        if best is None or key(item) > key(best):
            best = item
    return best


def first_min(items: Iterable[T], key: Callable[[T], float]):
    """Item with the smallest key; on ties the first one wins. None for no items."""
    best = None
    for item in items:
        if best is None or key(item) < key(best):
            best = item
    return best
