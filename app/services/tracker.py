from datetime import datetime
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.transaction import Budget
from app.schemas.budget import BudgetProgress, BudgetStatusResponse
from app.services.analytics import AnalyticsService
from app.services.budgets import BudgetService

WARNING_PERCENT = 80
OVER_PERCENT = 100


class BudgetTracker:
    @staticmethod
    def evaluate(limit: float, spending: float) -> BudgetProgress:
        """Consumption of ``limit`` by ``spending``, capped at 100 percent.

        A zero limit reports 0 percent rather than dividing by zero.
        """
        if limit:
            percentage = min((spending / limit) * 100, OVER_PERCENT)
        else:
            percentage = 0.0

        is_over = percentage >= OVER_PERCENT
        if is_over:
            state = "over"
            remaining = spending - limit
        else:
            state = "warning" if percentage >= WARNING_PERCENT else "ok"
            remaining = limit - spending

        return BudgetProgress(
            spending=round(spending, 2),
            percentage=percentage,
            is_over_budget=is_over,
            remaining_or_overage=round(remaining, 2),
            status=state
        )

    @staticmethod
    def _status(budget: Budget, spending: float) -> BudgetStatusResponse:
        progress = BudgetTracker.evaluate(budget.limit, spending)
        return BudgetStatusResponse(
            id=budget.id,
            category=budget.category,
            limit=budget.limit,
            month=budget.month,
            year=budget.year,
            **progress.model_dump()
        )

    @staticmethod
    async def budget_statuses(db: AsyncSession, user_id: int, as_of: datetime) -> list[BudgetStatusResponse]:
        budgets = await BudgetService.list_current_period(db, user_id, as_of)
        if not budgets:
            return []

        totals = await AnalyticsService.category_totals(db, user_id, as_of)
        spent_by_category = {t.category: t.total for t in totals}

        return [BudgetTracker._status(b, spent_by_category.get(b.category, 0.0)) for b in budgets]

    @staticmethod
    async def check_category(
            db: AsyncSession, user_id: int, category: str, as_of: datetime
    ) -> Optional[BudgetStatusResponse]:
        for status in await BudgetTracker.budget_statuses(db, user_id, as_of):
            if status.category == category:
                return status
        return None
