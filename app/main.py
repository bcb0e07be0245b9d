import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

# ✅ Import All API Routes
from app.api.routes import admin, auth, drivers, health, jobs, subscriptions, users

from app.core import config
from app.core.errors import AppError
from app.core.logging_config import setup_logging
from app.core.messages import message
from app.db.init_db import init_db
from app.db.migrate import run_migrations
from app.db.session import SessionLocal
from app.services.user_service import ensure_admin_user

logger = logging.getLogger(__name__)


# ============================================
# ✅ STARTUP
# ============================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(config.LOG_LEVEL, config.LOG_DIR)
    config.validate_settings()
    logger.info(f"Starting TruckMatch API (environment={config.ENVIRONMENT})")

    if config.RUN_MIGRATIONS:
        run_migrations()
    else:
        init_db()

    db = SessionLocal()
    try:
        ensure_admin_user(db)
    finally:
        db.close()

    yield
    logger.info("TruckMatch API stopped")


# ============================================
# ✅ FASTAPI APP INIT
# ============================================

app = FastAPI(title="TruckMatch API", version="1.0.0", lifespan=lifespan)

# ✅ CORS: cookies need an explicit origin, never "*"
app.add_middleware(
    CORSMiddleware,
    allow_origins=[config.FRONTEND_URL],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE"],
    allow_headers=["Content-Type", "X-Admin-Bootstrap-Token"],
)


# ============================================
# ✅ ERROR HANDLERS
# ============================================

@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} -> {exc.status_code} {exc.code}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    fields = [
        {"field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"), "message": err.get("msg", "")}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content={"error": message("validation_error"), "code": "validation_error", "fields": fields},
    )


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"Database error on {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(status_code=500, content={"error": message("internal_error"), "code": "internal_error"})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(status_code=500, content={"error": message("internal_error"), "code": "internal_error"})


# ============================================
# ✅ REGISTER ALL ROUTERS
# ============================================

app.include_router(auth.router)
app.include_router(users.router)
app.include_router(subscriptions.router)
app.include_router(drivers.router)
app.include_router(jobs.router)
app.include_router(admin.router)
app.include_router(health.router)


@app.get("/")
def root():
    return {"status": "TruckMatch API running"}
