import logging
from datetime import datetime

from sqlalchemy import select, func, case
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import month_start
from app.core.exceptions import PersistenceError
from app.models.transaction import Transaction, DEFAULT_CATEGORY
from app.schemas.analytics import CategoryTotal, MonthlySummary

logger = logging.getLogger(__name__)


class AnalyticsService:
    """Current-month figures, recomputed from transaction rows on every call."""

    @staticmethod
    async def category_totals(db: AsyncSession, user_id: int, as_of: datetime) -> list[CategoryTotal]:
        # Income and expense magnitudes are merged per category: this is a
        # turnover figure, not an expense-only breakdown.
        query = select(
            Transaction.category,
            func.sum(func.abs(Transaction.amount)).label("total")
        ).where(
            Transaction.user_id == user_id,
            Transaction.date >= month_start(as_of)
        ).group_by(Transaction.category).order_by(func.min(Transaction.id))

        try:
            res = await db.execute(query)
        except SQLAlchemyError:
            logger.exception("Error fetching category totals for user %s", user_id)
            raise PersistenceError("Failed to fetch category totals")

        # NULL, empty and blank categories fold into the default one
        by_category = {}
        for r in res.all():
            key = (r.category or "").strip() or DEFAULT_CATEGORY
            by_category[key] = by_category.get(key, 0.0) + (r.total or 0.0)

        return [
            CategoryTotal(category=cat, total=round(total, 2))
            for cat, total in by_category.items()
            if round(total, 2)
        ]

    @staticmethod
    async def monthly_summary(db: AsyncSession, user_id: int, as_of: datetime) -> MonthlySummary:
        query = select(
            func.sum(case((Transaction.amount >= 0, Transaction.amount), else_=0)).label("income"),
            func.sum(case((Transaction.amount < 0, -Transaction.amount), else_=0)).label("expense"),
            func.count(Transaction.id).label("transaction_count")
        ).where(
            Transaction.user_id == user_id,
            Transaction.date >= month_start(as_of)
        )

        try:
            res = await db.execute(query)
        except SQLAlchemyError:
            logger.exception("Error fetching monthly summary for user %s", user_id)
            raise PersistenceError("Failed to fetch monthly summary")
        row = res.one()

        income = round(row.income or 0.0, 2)
        expense = round(row.expense or 0.0, 2)

        return MonthlySummary(
            income=income,
            expense=expense,
            balance=round(income - expense, 2),
            transaction_count=row.transaction_count or 0
        )
