from pydantic import BaseModel, Field, ConfigDict, field_validator, field_serializer
from typing import Literal

BudgetState = Literal["ok", "warning", "over"]


class BudgetSet(BaseModel):
    category: str = Field(..., min_length=1)
    limit: float = Field(..., ge=0, allow_inf_nan=False)

    @field_validator("category")
    @classmethod
    def category_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Category must not be blank")
        return v


class BudgetLimitUpdate(BaseModel):
    limit: float = Field(..., ge=0, allow_inf_nan=False)


class BudgetResponse(BaseModel):
    id: int
    user_id: int
    category: str
    limit: float
    month: int
    year: int

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("limit")
    def serialize_limit(self, v: float) -> float:
        return round(v, 2)


class BudgetProgress(BaseModel):
    spending: float
    percentage: float
    is_over_budget: bool
    remaining_or_overage: float
    status: BudgetState


class BudgetStatusResponse(BudgetProgress):
    id: int
    category: str
    limit: float
    month: int
    year: int

    @field_serializer("limit")
    def serialize_limit(self, v: float) -> float:
        return round(v, 2)
