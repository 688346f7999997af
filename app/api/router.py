import logging
from typing import List

from fastapi import APIRouter, Depends, BackgroundTasks, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import get_system_time, month_start
from app.core.database import get_db
from app.core.exceptions import PersistenceError
from app.core.security import CurrentUser, get_current_user
from app.models.transaction import CATEGORIES, DEFAULT_CATEGORY
from app.schemas.analytics import CategoryTotal, MonthlySummary, CategoriesResponse
from app.schemas.budget import BudgetSet, BudgetLimitUpdate, BudgetResponse, BudgetStatusResponse
from app.schemas.transaction import (
    TransactionCreate, TransactionUpdate, TransactionResponse, AffectedRows, DeleteResult
)
from app.services import notifications
from app.services.analytics import AnalyticsService
from app.services.budgets import BudgetService
from app.services.tracker import BudgetTracker
from app.services.transactions import TransactionService, is_income

logger = logging.getLogger(__name__)

api_router = APIRouter()


@api_router.get("/transactions", response_model=List[TransactionResponse], tags=["Transactions"])
async def get_transactions(user: CurrentUser = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    return await TransactionService.list_by_user(db, user.user_id)


@api_router.post("/transactions", response_model=TransactionResponse, status_code=status.HTTP_201_CREATED,
                 tags=["Transactions"])
async def add_transaction(
        trx: TransactionCreate,
        bg_tasks: BackgroundTasks,
        user: CurrentUser = Depends(get_current_user),
        db: AsyncSession = Depends(get_db)
):
    now = get_system_time()
    db_obj = await TransactionService.create(
        db, user.user_id, trx.text, trx.amount, trx.category, trx.date, now=now
    )
    response = TransactionResponse.model_validate(db_obj)

    # only expenses inside the current period count toward its budgets
    if is_income(db_obj.amount) or db_obj.date < month_start(now):
        return response

    # the transaction is already stored; the budget check must not fail the request
    try:
        budget_status = await BudgetTracker.check_category(db, user.user_id, db_obj.category, now)
    except PersistenceError:
        logger.warning("Budget check skipped for transaction %s", db_obj.id)
        return response

    if budget_status is not None:
        response.budget_warning = notifications.budget_warning_message(budget_status)
        if response.budget_warning:
            bg_tasks.add_task(notifications.notifier.send_budget_alert, user.email, budget_status)
    return response


@api_router.put("/transactions/{transaction_id}", response_model=AffectedRows, tags=["Transactions"])
async def edit_transaction(
        transaction_id: int,
        trx: TransactionUpdate,
        user: CurrentUser = Depends(get_current_user),
        db: AsyncSession = Depends(get_db)
):
    count = await TransactionService.update(
        db, transaction_id, user.user_id, trx.text, trx.amount, trx.category, trx.date
    )
    return AffectedRows(count=count)


@api_router.delete("/transactions/{transaction_id}", response_model=DeleteResult, tags=["Transactions"])
async def remove_transaction(
        transaction_id: int,
        user: CurrentUser = Depends(get_current_user),
        db: AsyncSession = Depends(get_db)
):
    count = await TransactionService.delete(db, transaction_id, user.user_id)
    return DeleteResult(message="Transaction deleted", count=count)


@api_router.get("/budgets", response_model=List[BudgetResponse], tags=["Budgets"])
async def get_budgets(user: CurrentUser = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    return await BudgetService.list_current_period(db, user.user_id, get_system_time())


@api_router.get("/budgets/status", response_model=List[BudgetStatusResponse], tags=["Budgets"])
async def get_budgets_status(user: CurrentUser = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    return await BudgetTracker.budget_statuses(db, user.user_id, get_system_time())


@api_router.post("/budgets", response_model=BudgetResponse, tags=["Budgets"])
async def set_budget(
        budget: BudgetSet,
        response: Response,
        user: CurrentUser = Depends(get_current_user),
        db: AsyncSession = Depends(get_db)
):
    db_obj, created = await BudgetService.upsert(
        db, user.user_id, budget.category, budget.limit, get_system_time()
    )
    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return db_obj


@api_router.put("/budgets/{budget_id}", response_model=AffectedRows, tags=["Budgets"])
async def edit_budget(
        budget_id: int,
        body: BudgetLimitUpdate,
        user: CurrentUser = Depends(get_current_user),
        db: AsyncSession = Depends(get_db)
):
    count = await BudgetService.update(db, budget_id, user.user_id, body.limit)
    return AffectedRows(count=count)


@api_router.delete("/budgets/{budget_id}", response_model=DeleteResult, tags=["Budgets"])
async def remove_budget(
        budget_id: int,
        user: CurrentUser = Depends(get_current_user),
        db: AsyncSession = Depends(get_db)
):
    count = await BudgetService.delete(db, budget_id, user.user_id)
    return DeleteResult(message="Budget deleted", count=count)


@api_router.get("/analytics/category-totals", response_model=List[CategoryTotal], tags=["Analytics"])
async def get_category_totals(user: CurrentUser = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    return await AnalyticsService.category_totals(db, user.user_id, get_system_time())


@api_router.get("/analytics/monthly-summary", response_model=MonthlySummary, tags=["Analytics"])
async def get_monthly_summary(user: CurrentUser = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    return await AnalyticsService.monthly_summary(db, user.user_id, get_system_time())


@api_router.get("/categories", response_model=CategoriesResponse, tags=["System"])
async def get_categories(user: CurrentUser = Depends(get_current_user)):
    return CategoriesResponse(categories=list(CATEGORIES), default=DEFAULT_CATEGORY)
