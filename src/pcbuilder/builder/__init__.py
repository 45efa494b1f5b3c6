"""Builder 模块：档位推导与总价计算"""

from .budget import (
    DEFAULT_FALLBACK_CATEGORY_ID,
    category_midpoint,
    find_active_category,
    format_budget,
    normalize_budget,
)
from .pricing import total_cost

__all__ = [
    "DEFAULT_FALLBACK_CATEGORY_ID",
    "category_midpoint",
    "find_active_category",
    "format_budget",
    "normalize_budget",
    "total_cost",
]
