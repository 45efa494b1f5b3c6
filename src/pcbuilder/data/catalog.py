"""
参考目录 - Reference Catalog

配置器使用的只读参考数据：用途、配件、预算档位、附加选项与内存容量。
Read-only reference data used by the configurator: use-cases, parts, budget
categories, extras and memory sizes.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import List, get_args

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from ..builder.budget import DEFAULT_FALLBACK_CATEGORY_ID
from ..schemas import (
    BUDGET_MAX,
    BUDGET_MIN,
    BudgetCategory,
    ExtraKey,
    ExtraOption,
    MemorySize,
    PartEntry,
    UseCaseId,
    UseCaseOption,
)


class CatalogError(ValueError):
    """参考数据不合法，应在引擎使用前失败"""


class Catalog(BaseModel):
    model_config = ConfigDict(frozen=True)

    use_cases: List[UseCaseOption]
    parts: List[PartEntry]
    categories: List[BudgetCategory]
    extras: List[ExtraOption]
    memory_sizes: List[MemorySize] = Field(default_factory=lambda: list(get_args(MemorySize)))
    default_use_case: UseCaseId = "gaming"
    default_memory_size: MemorySize = "Auto"
    default_budget: int = 1400
    fallback_category_id: str = DEFAULT_FALLBACK_CATEGORY_ID

    @model_validator(mode="after")
    def _check_tables(self) -> "Catalog":
        # 1. 表不能为空
        for table in ("use_cases", "parts", "categories"):
            if not getattr(self, table):
                raise ValueError(f"{table} must not be empty")

        # 2. id 唯一
        _ensure_unique("use_cases", [u.id for u in self.use_cases])
        _ensure_unique("categories", [c.id for c in self.categories])
        _ensure_unique("extras", [e.key for e in self.extras])
        _ensure_unique("memory_sizes", list(self.memory_sizes))

        # 3. 档位区间有效、首尾相接并覆盖整个预算范围
        for category in self.categories:
            if category.min >= category.max:
                raise ValueError(f"category {category.id!r} has empty interval [{category.min}, {category.max})")
        for prev, nxt in zip(self.categories, self.categories[1:]):
            if prev.max != nxt.min:
                raise ValueError(
                    f"categories {prev.id!r} and {nxt.id!r} are not contiguous ({prev.max} != {nxt.min})"
                )
        if self.categories[0].min != BUDGET_MIN or self.categories[-1].max != BUDGET_MAX:
            raise ValueError(
                f"categories must cover [{BUDGET_MIN}, {BUDGET_MAX}], "
                f"got [{self.categories[0].min}, {self.categories[-1].max}]"
            )

        # 4. 默认值必须在表内
        if self.fallback_category_id not in {c.id for c in self.categories}:
            raise ValueError(f"fallback category {self.fallback_category_id!r} is not defined")
        if self.default_use_case not in {u.id for u in self.use_cases}:
            raise ValueError(f"default use case {self.default_use_case!r} is not defined")
        if self.default_memory_size not in self.memory_sizes:
            raise ValueError(f"default memory size {self.default_memory_size!r} is not defined")
        if not BUDGET_MIN <= self.default_budget <= BUDGET_MAX:
            raise ValueError(f"default budget {self.default_budget} is outside [{BUDGET_MIN}, {BUDGET_MAX}]")

        # 5. 附加选项必须覆盖全部 key
        missing = set(get_args(ExtraKey)) - {e.key for e in self.extras}
        if missing:
            raise ValueError(f"extras missing keys: {sorted(missing)}")
        return self

    @classmethod
    def build(cls, **data) -> "Catalog":
        """校验并构建目录，失败时抛出 CatalogError"""
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise CatalogError(str(exc)) from exc

    @classmethod
    def from_json_file(cls, path: Path) -> "Catalog":
        if not path.exists():
            raise CatalogError(f"catalog file missing: {path}")
        with path.open("r", encoding="utf-8") as f:
            try:
                raw = json.load(f)
            except json.JSONDecodeError as exc:
                raise CatalogError(f"catalog file {path} is not valid JSON: {exc}") from exc
        if not isinstance(raw, dict):
            raise CatalogError(f"catalog file {path} must contain a JSON object")
        return cls.build(**raw)

    def find_category(self, category_id: str) -> BudgetCategory | None:
        for category in self.categories:
            if category.id == category_id:
                return category
        return None


def _ensure_unique(table: str, ids: List[str]) -> None:
    seen = set()
    for item in ids:
        if item in seen:
            raise ValueError(f"duplicate id {item!r} in {table}")
        seen.add(item)


DEFAULT_USE_CASES = [
    UseCaseOption(
        id="workstation",
        label="Workstation",
        description="Content creation & rendering",
        icon="briefcase",
    ),
    UseCaseOption(id="gaming", label="Gaming", description="High FPS gaming & VR", icon="gamepad"),
    UseCaseOption(id="office", label="Office", description="Productivity & web browsing", icon="bar-chart-2"),
]

DEFAULT_PARTS = [
    PartEntry(name="CPU", model="Intel Core i5-12600K", unit_price=279, icon="cpu"),
    PartEntry(name="GPU", model="RTX 3070", unit_price=499, icon="monitor"),
    PartEntry(name="Motherboard", model="B550 Gaming Plus", unit_price=129, icon="server"),
    PartEntry(name="RAM", model="16GB DDR4-3600", unit_price=79, icon="memory-stick"),
    PartEntry(name="Storage", model="1TB NVMe + 2TB HDD", unit_price=129, icon="hard-drive"),
    PartEntry(name="PSU", model="850W 80+ Gold", unit_price=139, icon="zap"),
]

DEFAULT_CATEGORIES = [
    BudgetCategory(id="entry", label="Entry", display_range="$500–$800", min=500, max=800),
    BudgetCategory(id="mid", label="Mid-Range", display_range="$800–$1,500", min=800, max=1500),
    BudgetCategory(id="high", label="High-End", display_range="$1,500+", min=1500, max=5000),
]

DEFAULT_EXTRAS = [
    ExtraOption(key="white", label="Full White PC", description="White case and components"),
    ExtraOption(key="rgb", label="RGB Lighting", description="LED lighting effects"),
]


def default_catalog() -> Catalog:
    return Catalog.build(
        use_cases=DEFAULT_USE_CASES,
        parts=DEFAULT_PARTS,
        categories=DEFAULT_CATEGORIES,
        extras=DEFAULT_EXTRAS,
    )


def load_catalog(path: Path | None = None) -> Catalog:
    """加载目录：给定路径时读 JSON，否则使用内置目录"""
    if path is None:
        return default_catalog()
    return Catalog.from_json_file(path)
