import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import select, desc, update, delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import get_system_time, to_local_naive
from app.core.exceptions import PersistenceError
from app.models.transaction import Transaction, DEFAULT_CATEGORY

logger = logging.getLogger(__name__)


def normalize_category(category: Optional[str]) -> str:
    return (category or "").strip() or DEFAULT_CATEGORY


def is_income(amount: float) -> bool:
    return amount >= 0


class TransactionService:
    @staticmethod
    async def create(
            db: AsyncSession,
            user_id: int,
            text: str,
            amount: float,
            category: Optional[str] = None,
            date: Optional[datetime] = None,
            now: Optional[datetime] = None,
    ) -> Transaction:
        db_obj = Transaction(
            user_id=user_id,
            text=text,
            amount=amount,
            category=normalize_category(category),
            date=to_local_naive(date) if date else (now or get_system_time()),
        )
        try:
            db.add(db_obj)
            await db.commit()
            await db.refresh(db_obj)
        except SQLAlchemyError:
            await db.rollback()
            logger.exception("Error creating transaction for user %s", user_id)
            raise PersistenceError("Failed to create transaction")

        logger.info("Transaction %s created for user %s (%s, %.2f)",
                    db_obj.id, user_id, db_obj.category, db_obj.amount)
        return db_obj

    @staticmethod
    async def list_by_user(db: AsyncSession, user_id: int) -> list[Transaction]:
        query = (
            select(Transaction)
            .where(Transaction.user_id == user_id)
            .order_by(desc(Transaction.date), desc(Transaction.id))
        )
        try:
            result = await db.execute(query)
        except SQLAlchemyError:
            logger.exception("Error fetching transactions for user %s", user_id)
            raise PersistenceError("Failed to fetch transactions")
        return list(result.scalars().all())

    @staticmethod
    async def update(
            db: AsyncSession,
            transaction_id: int,
            user_id: int,
            text: str,
            amount: float,
            category: Optional[str] = None,
            date: Optional[datetime] = None,
    ) -> int:
        values = {
            "text": text,
            "amount": amount,
            "category": normalize_category(category),
        }
        if date:
            values["date"] = to_local_naive(date)

        # a row owned by someone else is indistinguishable from a missing one
        stmt = (
            update(Transaction)
            .where(Transaction.id == transaction_id, Transaction.user_id == user_id)
            .values(**values)
        )
        try:
            result = await db.execute(stmt)
            await db.commit()
        except SQLAlchemyError:
            await db.rollback()
            logger.exception("Error updating transaction %s", transaction_id)
            raise PersistenceError("Failed to update transaction")

        logger.info("Transaction %s update by user %s affected %s row(s)",
                    transaction_id, user_id, result.rowcount)
        return result.rowcount

    @staticmethod
    async def delete(db: AsyncSession, transaction_id: int, user_id: int) -> int:
        stmt = delete(Transaction).where(
            Transaction.id == transaction_id,
            Transaction.user_id == user_id,
        )
        try:
            result = await db.execute(stmt)
            await db.commit()
        except SQLAlchemyError:
            await db.rollback()
            logger.exception("Error deleting transaction %s", transaction_id)
            raise PersistenceError("Failed to delete transaction")

        logger.info("Transaction %s delete by user %s affected %s row(s)",
                    transaction_id, user_id, result.rowcount)
        return result.rowcount
