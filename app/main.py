import asyncio
from fastapi import FastAPI, Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware
from fastapi.responses import JSONResponse
from app.core.database import session_manager, aget_db
from sqlalchemy.ext.asyncio import AsyncSession

# Core routers for the progress tracker
from app.api.v1.endpoints.projects import router as projects_router
from app.api.v1.endpoints.milestones import router as milestones_router
from app.api.v1.endpoints.weeklyprogress import router as weekly_progress_router
from app.api.v1.endpoints.reminders import router as reminders_router, mail_client

from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from sqlalchemy import text
import logging
from contextlib import asynccontextmanager
from app.core.config import settings
from app.core.exceptions import ProgressTrackerError
from app.utils.schedulers.processduereminders import due_reminder_scheduler

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)
limiter = Limiter(key_func=get_remote_address)

scheduler_tasks = []

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Async context manager for app lifespan events"""

    try:
        logger.info("🚀 Starting progress tracker application...")

        logger.info("🔌 Initializing database connection pool...")
        await session_manager.init()
        logger.info("✅ Database ready, all tables created")

        if not settings.MAIL_CONFIGURED:
            logger.warning("⚠️ Microsoft Graph credentials missing, reminder emails will fail to send")

        if settings.REMINDER_SCHEDULER_ENABLED:
            logger.info("📅 Starting due reminder scheduler...")
            task = asyncio.create_task(due_reminder_scheduler(mail_client, settings))
            scheduler_tasks.append(task)
            logger.info("✅ Due reminder scheduler started")

    except Exception as e:
        logger.critical(f"🔥 Application startup failed: {str(e)}")
        raise

    try:
        logger.info("🏁 Progress tracker startup complete")
        yield
    finally:
        try:
            logger.info("🛑 Beginning application shutdown...")

            # Cancel all scheduler tasks
            for task in scheduler_tasks:
                if not task.done():
                    logger.info("⏹️ Stopping scheduler...")
                    task.cancel()
                    try:
                        await task
                    except asyncio.CancelledError:
                        logger.info("✅ Scheduler stopped")
            scheduler_tasks.clear()

            logger.info("🔌 Closing database connections...")
            await session_manager.close()
            logger.info("✅ Database connections closed cleanly")
        except Exception as e:
            logger.error(f"⚠️ Error during shutdown: {str(e)}")
            raise
        finally:
            logger.info("👋 Application shutdown complete")


app = FastAPI(
    title="Progress Tracker API",
    description="API for tracking projects, milestones, weekly progress and email reminders",
    version="1.0.0",
    lifespan=lifespan,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.add_middleware(
    SessionMiddleware,
    secret_key=settings.SESSION_SECRET_KEY,
    max_age=3600,
    same_site="none" if settings.ENVIRONMENT == "production" else "lax",
    https_only=True if settings.ENVIRONMENT == "production" else False
)

@app.middleware("http")
async def log_requests(request: Request, call_next):
    logger.info(f"Request: {request.method} {request.url}")
    response = await call_next(request)
    logger.info(f"Response status: {response.status_code}")
    return response


# CORS Configuration
if settings.ENVIRONMENT == "production":
    allowed_origins = [settings.FRONTEND_URL, settings.APP_URL]
else:
    allowed_origins = [
        "http://localhost:3000",
        "http://localhost:3001",
    ]

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logging.error(f"Validation Error: {exc.errors()}")
    return JSONResponse(
        status_code=422,
        content={"detail": exc.errors()},
    )

@app.exception_handler(ProgressTrackerError)
async def progress_tracker_exception_handler(request: Request, exc: ProgressTrackerError):
    if exc.status_code >= 500:
        logger.error(f"{exc.kind} on {request.method} {request.url.path}: {exc.message}")
    else:
        logger.info(f"{exc.kind} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
    )

@app.get("/", tags=["Health Check"])
async def health_check(db: AsyncSession = Depends(aget_db)):
    try:
        await db.execute(text("SELECT 1"))
        return {
            "status": "healthy",
            "service": "Progress Tracker API",
            "database": "connected",
            "mail_configured": settings.MAIL_CONFIGURED,
            "schedulers_running": len([t for t in scheduler_tasks if not t.done()])
        }
    except Exception as e:
        logger.error(f"Health check failed: {str(e)}")
        return {
            "status": "unhealthy",
            "service": "Progress Tracker API",
            "database": "disconnected",
            "error": str(e)
        }


# Include core routers
app.include_router(projects_router, prefix="/api/v1", tags=["Projects"])
app.include_router(milestones_router, prefix="/api/v1", tags=["Milestones"])
app.include_router(weekly_progress_router, prefix="/api/v1", tags=["Weekly Progress"])
app.include_router(reminders_router, prefix="/api/v1", tags=["Reminders"])

logger.info(f"✅ Loaded {len(app.routes)} routes")
