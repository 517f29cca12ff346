"""
ShiftLedger: application entry point.

This is the **only** file that assembles the app.  Business rules live in
``services/``; ``api/`` only translates HTTP to service calls.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from functools import partial

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy import select

from shiftledger.api.v1.api import api_router
from shiftledger.api.v1.endpoints.auth import limiter
from shiftledger.core.config import settings
from shiftledger.core.exceptions import register_exception_handlers
from shiftledger.core.security import get_password_hash
from shiftledger.db.base import Base
from shiftledger.db.session import async_session_factory, engine
# Ensure all models are imported so metadata.create_all can see them
from shiftledger.models.daily_record import DailyRecord  # noqa: F401
from shiftledger.models.employee import Employee  # noqa: F401
from shiftledger.models.holiday import Holiday, HolidayBackup  # noqa: F401
from shiftledger.models.punch import Punch  # noqa: F401
from shiftledger.models.submission import ShiftSubmission  # noqa: F401
from shiftledger.models.user import User
from shiftledger.services.calendar import DoubleTimeCalendar
from shiftledger.services.holidays import load_holiday_dates

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


# ── Lifespan ────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(_app: FastAPI):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables initialised")

    # Seed default admin user on first run
    async with async_session_factory() as session:
        result = await session.execute(
            select(User).where(User.email == settings.FIRST_ADMIN_EMAIL)
        )
        if result.scalar_one_or_none() is None:
            admin = User(
                email=settings.FIRST_ADMIN_EMAIL,
                hashed_password=get_password_hash(settings.FIRST_ADMIN_PASSWORD),
                full_name="System Administrator",
                role="admin",
            )
            session.add(admin)
            await session.commit()
            logger.info(
                "Default admin created: %s (password: <redacted>)",
                settings.FIRST_ADMIN_EMAIL,
            )

    logger.info("ShiftLedger v%s started", settings.VERSION)
    yield
    await engine.dispose()
    logger.info("Shutdown complete")


# ── App factory ─────────────────────────────────────────────────────
def create_app() -> FastAPI:
    application = FastAPI(
        title=settings.PROJECT_NAME,
        description="Time attendance reconciliation and hours engine",
        version=settings.VERSION,
        openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # One calendar per process; holiday writes invalidate it
    application.state.calendar = DoubleTimeCalendar(
        partial(load_holiday_dates, async_session_factory),
        ttl_seconds=settings.DOUBLE_TIME_CACHE_TTL_SECONDS,
    )

    application.state.limiter = limiter
    application.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)  # type: ignore[arg-type]

    # Global exception handlers (prevent stack-trace leakage)
    register_exception_handlers(application)

    application.include_router(api_router, prefix=settings.API_V1_PREFIX)
    return application


app = create_app()
