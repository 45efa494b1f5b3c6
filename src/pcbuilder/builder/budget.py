"""
预算档位模块 - Budget Tier Module

根据预算值推导当前档位，并提供档位中点与滑块取值归一化。
Derive the active budget tier from a budget value, plus tier midpoints and slider normalization.
"""

from __future__ import annotations

import logging
from typing import Sequence

from ..schemas import BUDGET_MAX, BUDGET_MIN, BUDGET_STEP, BudgetCategory

logger = logging.getLogger(__name__)

DEFAULT_FALLBACK_CATEGORY_ID = "mid"
"""
默认兜底档位 - Default Fallback Category

当预算值不落在任何档位区间时使用的档位 id。
Category id used when the budget value matches no interval.
"""


def find_active_category(
    budget: int,
    categories: Sequence[BudgetCategory],
    fallback_id: str = DEFAULT_FALLBACK_CATEGORY_ID,
) -> BudgetCategory:
    """
    查找当前档位 - Find Active Category

    按顺序线性扫描档位，返回第一个满足 ``min <= budget < max`` 的档位；
    最后一个档位的上界视为闭区间。
    Linear scan in order; the first category with ``min <= budget < max`` wins,
    and the last category's upper bound is treated as closed.

    参数 Parameters:
        budget: 当前预算
                Current budget
        categories: 有序档位表
                    Ordered category table
        fallback_id: 无匹配时返回的档位 id
                     Category id returned when nothing matches

    返回 Returns:
        当前档位，永不为空
        The active category, never empty
    """
    last_index = len(categories) - 1
    for index, category in enumerate(categories):
        if category.contains(budget, closed_upper=index == last_index):
            return category

    for category in categories:
        if category.id == fallback_id:
            logger.warning("budget %s matches no category, falling back to %r", budget, fallback_id)
            return category
    raise LookupError(f"fallback category {fallback_id!r} is not in the category table")


def category_midpoint(category: BudgetCategory) -> int:
    """档位中点，向下取整"""
    return (category.min + category.max) // 2


def normalize_budget(
    value: int,
    minimum: int = BUDGET_MIN,
    maximum: int = BUDGET_MAX,
    step: int = BUDGET_STEP,
) -> int:
    """
    归一化预算 - Normalize Budget

    与滑块控件行为一致：先按步长吸附，再夹到取值范围内。
    Behaves like the range control: snap to the nearest step, then clamp to the domain.
    """
    if step > 0:
        value = minimum + ((value - minimum + step // 2) // step) * step
    return max(minimum, min(maximum, value))


def format_budget(value: int) -> str:
    return f"${value:,}"
