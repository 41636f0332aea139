from fastapi import FastAPI, Depends
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy import text

from app.db.base import get_db
from app.core.config import settings
from app.core.logging import configure_logging
from app.services.streaks import set_collation_locale
from app.routers import goals as goals_router
from app.routers import profiles as profiles_router
from app.routers import leaderboard as leaderboard_router
from app.routers import feed as feed_router
from app.routers import history as history_router
from app.core.errors import (
    StreakboardException,
    streakboard_exception_handler,
    validation_exception_handler,
    store_exception_handler,
    unhandled_exception_handler,
)

logger = configure_logging(settings.LOG_LEVEL)
if settings.COLLATION_LOCALE:
    set_collation_locale(settings.COLLATION_LOCALE)

app = FastAPI(
    title="Streakboard API",
    description=(
        "**Daily goals, streaks and a public leaderboard**\n\n"
        "Users plan goals per calendar day, complete them to build a streak "
        "of consecutive days, and optionally share goals to a public feed.\n\n"
        "Callers identify themselves with the `X-User-Id` header "
        "(set by the identity provider in front of this API).\n\n"
        "All error responses follow the `{code, message, details}` envelope."
    ),
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# --- CORS ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Exception handlers (most specific first) ---
app.add_exception_handler(StreakboardException, streakboard_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(SQLAlchemyError, store_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# --- Routers ---
app.include_router(goals_router.router)
app.include_router(profiles_router.router)
app.include_router(leaderboard_router.router)
app.include_router(feed_router.router)
app.include_router(history_router.router)

logger.info("streakboard started (env=%s)", settings.APP_ENV)


@app.get("/health", tags=["health"], summary="Health check")
def health(db: Session = Depends(get_db)):
    """
    Returns `{"status": "ok", "db": "ok"}` when both the API and the database
    are reachable. Returns HTTP 503 if the DB is down.
    Used by Railway / Render as the liveness check.
    """
    try:
        db.execute(text("SELECT 1"))
        db_status = "ok"
    except SQLAlchemyError:
        logger.warning("health check: database unreachable")
        db_status = "unreachable"

    if db_status != "ok":
        return JSONResponse(
            status_code=503,
            content={"status": "error", "db": db_status},
        )
    return {"status": "ok", "db": "ok", "env": settings.APP_ENV}
