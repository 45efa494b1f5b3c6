"""配件总价计算"""

from __future__ import annotations

from typing import Iterable

from ..schemas import PartEntry


def total_cost(parts: Iterable[PartEntry]) -> int:
    """计算配件清单总价

    Args:
        parts: 配件清单

    Returns:
        所有配件单价之和
    """
    total = 0
    for part in parts:
        total += part.unit_price
    return total
