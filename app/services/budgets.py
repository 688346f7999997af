import logging
from datetime import datetime

from sqlalchemy import select, update, delete
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import current_period
from app.core.exceptions import PersistenceError
from app.models.transaction import Budget

logger = logging.getLogger(__name__)


class BudgetService:
    @staticmethod
    async def _find_for_period(db: AsyncSession, user_id: int, category: str, month: int, year: int):
        stmt = select(Budget).where(
            Budget.user_id == user_id,
            Budget.category == category,
            Budget.month == month,
            Budget.year == year,
        )
        res = await db.execute(stmt)
        return res.scalar_one_or_none()

    @staticmethod
    async def list_current_period(db: AsyncSession, user_id: int, as_of: datetime) -> list[Budget]:
        month, year = current_period(as_of)
        query = (
            select(Budget)
            .where(Budget.user_id == user_id, Budget.month == month, Budget.year == year)
            .order_by(Budget.id)
        )
        try:
            result = await db.execute(query)
        except SQLAlchemyError:
            logger.exception("Error fetching budgets for user %s", user_id)
            raise PersistenceError("Failed to fetch budgets")
        return list(result.scalars().all())

    @staticmethod
    async def upsert(
            db: AsyncSession,
            user_id: int,
            category: str,
            limit: float,
            as_of: datetime,
    ) -> tuple[Budget, bool]:
        """Create the budget for (user, category, period) or overwrite its limit.

        Returns the surviving row and whether it was newly created. Two
        concurrent callers race on the unique constraint; the loser falls back
        to updating the winner's row, so the last write wins on ``limit``.
        """
        month, year = current_period(as_of)
        try:
            budget = await BudgetService._find_for_period(db, user_id, category, month, year)
            created = False

            if budget is None:
                try:
                    async with db.begin_nested():
                        budget = Budget(user_id=user_id, category=category, limit=limit, month=month, year=year)
                        db.add(budget)
                    created = True
                except IntegrityError:
                    logger.info("Concurrent budget insert for user %s %s %s/%s, updating instead",
                                user_id, category, month, year)
                    budget = await BudgetService._find_for_period(db, user_id, category, month, year)
                    if budget is None:
                        raise

            if not created:
                budget.limit = limit

            await db.commit()
            await db.refresh(budget)
        except SQLAlchemyError:
            await db.rollback()
            logger.exception("Error saving budget for user %s", user_id)
            raise PersistenceError("Failed to create budget")

        logger.info("Budget %s %s for user %s: %s %.2f (%s/%s)",
                    budget.id, "created" if created else "updated", user_id, category, limit, month, year)
        return budget, created

    @staticmethod
    async def update(db: AsyncSession, budget_id: int, user_id: int, limit: float) -> int:
        stmt = (
            update(Budget)
            .where(Budget.id == budget_id, Budget.user_id == user_id)
            .values(limit=limit)
        )
        try:
            result = await db.execute(stmt)
            await db.commit()
        except SQLAlchemyError:
            await db.rollback()
            logger.exception("Error updating budget %s", budget_id)
            raise PersistenceError("Failed to update budget")

        logger.info("Budget %s update by user %s affected %s row(s)", budget_id, user_id, result.rowcount)
        return result.rowcount

    @staticmethod
    async def delete(db: AsyncSession, budget_id: int, user_id: int) -> int:
        stmt = delete(Budget).where(Budget.id == budget_id, Budget.user_id == user_id)
        try:
            result = await db.execute(stmt)
            await db.commit()
        except SQLAlchemyError:
            await db.rollback()
            logger.exception("Error deleting budget %s", budget_id)
            raise PersistenceError("Failed to delete budget")

        logger.info("Budget %s delete by user %s affected %s row(s)", budget_id, user_id, result.rowcount)
        return result.rowcount
