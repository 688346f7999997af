from sqlalchemy import Column, Integer, String, Float, DateTime, UniqueConstraint
from app.core.database import Base

DEFAULT_CATEGORY = "General"
CATEGORIES = ("Food", "Rent", "Transport", "Entertainment", "Shopping", "General")


class Transaction(Base):
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, index=True, nullable=False)

    text = Column(String, nullable=False, default="")
    # sign encodes direction: negative is an expense, zero or positive is income
    amount = Column(Float, nullable=False)
    category = Column(String, default=DEFAULT_CATEGORY, index=True)
    date = Column(DateTime, index=True, nullable=False)


class Budget(Base):
    __tablename__ = "budgets"
    __table_args__ = (
        UniqueConstraint("user_id", "category", "month", "year", name="uq_budget_user_category_period"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, index=True, nullable=False)

    category = Column(String, nullable=False)
    limit = Column(Float, nullable=False, default=0.0)
    month = Column(Integer, nullable=False)  # 0-11
    year = Column(Integer, nullable=False)
