from __future__ import annotations

from typing import Dict, List, Literal

from pydantic import BaseModel, ConfigDict, Field


UseCaseId = Literal["workstation", "gaming", "office"]
ExtraKey = Literal["white", "rgb"]
MemorySize = Literal["Auto", "16GB", "32GB", "64GB"]
CategoryId = str

BUDGET_MIN = 500
BUDGET_MAX = 5000
BUDGET_STEP = 50


class UseCaseOption(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: UseCaseId
    label: str
    description: str = ""
    icon: str = ""


class PartEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    model: str
    unit_price: int = Field(gt=0)
    icon: str = ""


class BudgetCategory(BaseModel):
    """预算档位（左闭右开，最后一档右端闭合）"""

    model_config = ConfigDict(frozen=True)

    id: CategoryId
    label: str
    display_range: str = ""
    min: int
    max: int

    def contains(self, budget: int, *, closed_upper: bool = False) -> bool:
        if closed_upper:
            return self.min <= budget <= self.max
        return self.min <= budget < self.max


class ExtraOption(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: ExtraKey
    label: str
    description: str = ""


class Extras(BaseModel):
    model_config = ConfigDict(frozen=True)

    white: bool = False
    rgb: bool = False

    def toggled(self, key: ExtraKey) -> "Extras":
        return self.model_copy(update={key: not getattr(self, key)})

    def as_dict(self) -> Dict[str, bool]:
        return {"white": self.white, "rgb": self.rgb}


class ConfigurationSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    budget: int
    budget_display: str
    use_case: UseCaseId
    extras: Extras
    memory_size: MemorySize
    active_category: BudgetCategory
    total_cost: int
    parts: List[PartEntry] = Field(default_factory=list)


# === HTTP 请求/响应 ===


class BudgetRequest(BaseModel):
    value: int


class CategoryRequest(BaseModel):
    category_id: CategoryId


class UseCaseRequest(BaseModel):
    use_case: UseCaseId


class MemorySizeRequest(BaseModel):
    memory_size: MemorySize


class SessionResponse(BaseModel):
    session_id: str
    configuration: ConfigurationSnapshot
