from pydantic import BaseModel, ConfigDict


class CategoryTotal(BaseModel):
    category: str
    total: float


class MonthlySummary(BaseModel):
    income: float
    expense: float
    balance: float
    transaction_count: int

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "income": 3000.0,
            "expense": 1080.0,
            "balance": 1920.0,
            "transaction_count": 4
        }
    })


class CategoriesResponse(BaseModel):
    categories: list[str]
    default: str
