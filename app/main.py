from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from app.config import settings
from app.core.clock import get_system_time
from app.core.database import init_db
from app.core.exceptions import PersistenceError, persistence_error_handler, validation_error_handler
from app.core.logging_config import configure_logging
from app.api.router import api_router

tags_metadata = [
    {
        "name": "Transactions",
        "description": "Signed income/expense entries of the authenticated user.",
    },
    {
        "name": "Budgets",
        "description": "Per-category monthly limits and their consumption.",
    },
    {
        "name": "Analytics",
        "description": "Current-month category totals and summary.",
    },
    {
        "name": "System",
        "description": "Service endpoints.",
    },
]

app = FastAPI(
    title=settings.PROJECT_NAME,
    description="""
### API documentation

Personal finance tracker: transactions, monthly budgets and analytics.

    """,
    version=settings.VERSION,
    openapi_tags=tags_metadata,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(PersistenceError, persistence_error_handler)
app.add_exception_handler(RequestValidationError, validation_error_handler)

@app.on_event("startup")
async def startup():
    configure_logging(settings.LOG_LEVEL)
    await init_db()

app.include_router(api_router, prefix=settings.API_V1_STR)

@app.get("/", tags=["System"])
def root():
    prefix = settings.API_V1_STR
    return {
        "message": "Expense Tracker API is running",
        "routes": [
            f"GET {prefix}/transactions",
            f"POST {prefix}/transactions",
            f"PUT {prefix}/transactions/:id",
            f"DELETE {prefix}/transactions/:id",
            f"GET {prefix}/budgets",
            f"GET {prefix}/budgets/status",
            f"POST {prefix}/budgets",
            f"GET {prefix}/analytics/category-totals",
            f"GET {prefix}/analytics/monthly-summary",
        ]
    }

@app.get("/health", tags=["System"])
def health():
    return {
        "status": "operational",
        "mode": "frozen_time" if settings.FROZEN_NOW else "wall_clock",
        "system_time": get_system_time()
    }
