from pydantic import BaseModel, Field, ConfigDict, field_serializer
from typing import Optional
from datetime import datetime


class TransactionBase(BaseModel):
    text: str
    amount: float = Field(..., allow_inf_nan=False)
    category: Optional[str] = None
    date: Optional[datetime] = None


class TransactionCreate(TransactionBase):
    pass


class TransactionUpdate(TransactionBase):
    pass


class TransactionResponse(BaseModel):
    id: int
    user_id: int
    text: str
    amount: float
    category: str
    date: datetime
    budget_warning: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("amount")
    def serialize_amount(self, v: float) -> float:
        return round(v, 2)


class AffectedRows(BaseModel):
    count: int


class DeleteResult(AffectedRows):
    message: str
