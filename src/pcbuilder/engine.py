"""
配置引擎 - Configuration Engine

持有一次会话内的可变配置状态（预算、用途、附加选项、内存容量），
并从状态与只读参考目录推导当前档位与总价。
Holds the mutable configuration state of one session (budget, use-case, extras,
memory size) and derives the active tier and total cost from state plus the
read-only reference catalog.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Callable, get_args

from .builder import category_midpoint, find_active_category, format_budget, total_cost
from .data import Catalog, default_catalog
from .schemas import (
    BudgetCategory,
    ConfigurationSnapshot,
    ExtraKey,
    Extras,
    MemorySize,
    UseCaseId,
)

logger = logging.getLogger(__name__)


class UnknownOptionError(ValueError):
    """选项不在封闭集合内"""


@dataclass(frozen=True)
class ConfigurationState:
    budget: int
    use_case: UseCaseId
    memory_size: MemorySize
    extras: Extras = field(default_factory=Extras)


class ConfigurationEngine:
    """
    配置引擎 - Configuration Engine

    状态只能通过 set_budget / select_category_midpoint / set_use_case /
    toggle_extra / set_memory_size 修改；派生值每次读取时重新计算。
    State changes only through the five mutators; derived values are recomputed
    on every read.
    """

    def __init__(self, catalog: Catalog | None = None):
        self.catalog = catalog or default_catalog()
        self._state = ConfigurationState(
            budget=self.catalog.default_budget,
            use_case=self.catalog.default_use_case,
            memory_size=self.catalog.default_memory_size,
        )

    # === 只读状态 ===

    @property
    def budget(self) -> int:
        return self._state.budget

    @property
    def use_case(self) -> UseCaseId:
        return self._state.use_case

    @property
    def extras(self) -> Extras:
        return self._state.extras

    @property
    def memory_size(self) -> MemorySize:
        return self._state.memory_size

    # === 修改操作 ===

    def set_budget(self, value: int) -> None:
        """按原值保存预算；范围由调用方（滑块）保证"""
        self._update(lambda state: replace(state, budget=int(value)))
        logger.debug("budget set to %s", value)

    def select_category_midpoint(self, category_id: str) -> None:
        """
        吸附到档位中点 - Snap To Tier Midpoint

        点击档位按钮时把预算移动到该档位的中点 floor((min + max) / 2)。
        Clicking a tier moves the budget to the tier midpoint floor((min + max) / 2).
        """
        category = self.catalog.find_category(category_id)
        if category is None:
            raise UnknownOptionError(f"unknown budget category: {category_id!r}")
        self.set_budget(category_midpoint(category))

    def set_use_case(self, use_case: UseCaseId) -> None:
        if use_case not in {u.id for u in self.catalog.use_cases}:
            raise UnknownOptionError(f"unknown use case: {use_case!r}")
        self._update(lambda state: replace(state, use_case=use_case))
        logger.debug("use case set to %s", use_case)

    def toggle_extra(self, key: ExtraKey) -> None:
        if key not in get_args(ExtraKey):
            raise UnknownOptionError(f"unknown extra: {key!r}")
        # 基于最新状态翻转，避免连续切换时丢失更新
        self._update(lambda state: replace(state, extras=state.extras.toggled(key)))
        logger.debug("extra %s toggled to %s", key, getattr(self._state.extras, key))

    def set_memory_size(self, size: MemorySize) -> None:
        if size not in self.catalog.memory_sizes:
            raise UnknownOptionError(f"unknown memory size: {size!r}")
        self._update(lambda state: replace(state, memory_size=size))
        logger.debug("memory size set to %s", size)

    def _update(self, fn: Callable[[ConfigurationState], ConfigurationState]) -> None:
        self._state = fn(self._state)

    # === 派生值 ===

    def active_category(self) -> BudgetCategory:
        return find_active_category(
            self._state.budget,
            self.catalog.categories,
            fallback_id=self.catalog.fallback_category_id,
        )

    def total_cost(self) -> int:
        return total_cost(self.catalog.parts)

    def snapshot(self) -> ConfigurationSnapshot:
        state = self._state
        return ConfigurationSnapshot(
            budget=state.budget,
            budget_display=format_budget(state.budget),
            use_case=state.use_case,
            extras=state.extras,
            memory_size=state.memory_size,
            active_category=self.active_category(),
            total_cost=self.total_cost(),
            parts=list(self.catalog.parts),
        )
