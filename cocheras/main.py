from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
import logging
import os
from fastapi.responses import JSONResponse
from dotenv import load_dotenv

# Load .env variables
load_dotenv()

# Configure base logging
logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())
logger = logging.getLogger("cocheras")

from cocheras.routers import (
    auth,
    users,
    districts,
    spaces,
    reservations,
    payments,
    reviews,
    notifications,
)
from cocheras.database import engine, Base, SessionLocal
from cocheras.exceptions import CocheraError
from cocheras.init_db import create_initial_admin, create_initial_districts
from cocheras.services.email import email_service
from cocheras.utils.clock import utcnow
import cocheras.models  # noqa: F401
import uvicorn


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create database tables
    Base.metadata.create_all(bind=engine)

    logger.info("Initializing database with default data...")
    db = SessionLocal()
    try:
        create_initial_districts(db)
        create_initial_admin(db)
    finally:
        db.close()

    _configure_email_error_reporting()
    yield


app = FastAPI(
    title="Cocheras API",
    description="API para publicar, reservar y pagar cocheras por hora",
    version="1.0.0",
    lifespan=lifespan,
)


# Configure email error reporting
def _configure_email_error_reporting() -> None:
    if not email_service.enabled:
        logger.info(
            "Email error reporting disabled (ENABLE_ERROR_EMAILS not set or false)"
        )
        return

    if not email_service.is_configured():
        logger.warning("Email service not configured: missing SMTP settings")
        return

    logger.info("Email error reporting configured successfully")


def _cors_origins():
    origins = os.getenv("CORS_ORIGINS", "*")
    return [origin.strip() for origin in origins.split(",") if origin.strip()]


# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Total-Count", "X-Total-Pages"],
)

# Include routers
app.include_router(auth.router, prefix="/auth", tags=["authentication"])
app.include_router(users.router, prefix="/users", tags=["users"])
app.include_router(districts.router, prefix="/districts", tags=["districts"])
app.include_router(spaces.router, prefix="/spaces", tags=["spaces"])
app.include_router(
    reservations.router, prefix="/reservations", tags=["reservations"]
)
app.include_router(payments.router, prefix="/payments", tags=["payments"])
app.include_router(reviews.router, prefix="/reviews", tags=["reviews"])
app.include_router(
    notifications.router, prefix="/notifications", tags=["notifications"]
)


@app.get("/")
def read_root():
    return {"message": "Welcome to Cocheras API"}


@app.exception_handler(CocheraError)
async def domain_exception_handler(request: Request, exc: CocheraError):
    logger.info(
        "Request rejected | path=%s | method=%s | status=%s | detail=%s",
        request.url.path,
        request.method,
        exc.status_code,
        exc.detail,
    )
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


# Global unhandled exception handler -> logs ERROR and sends email
@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(
        "Unhandled error | path=%s | method=%s | client=%s",
        request.url.path,
        request.method,
        request.client.host if request.client else "unknown",
    )

    if email_service.is_configured():
        error_data = {
            "path": request.url.path,
            "method": request.method,
            "client": request.client.host if request.client else "unknown",
            "exception": exc,
            "timestamp": utcnow().strftime("%Y-%m-%d %H:%M:%S"),
        }
        email_service.send_error_email(error_data)

    return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})


if __name__ == "__main__":
    uvicorn.run("cocheras.main:app", host="0.0.0.0", port=8000, reload=True)
