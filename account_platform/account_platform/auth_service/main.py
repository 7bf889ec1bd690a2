"""
Auth Service - registration, login and password reset over HTTP
"""
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import logging

from .config import settings
from .db import init_db
from .deps import get_claims_verifier
from .routes import auth, health, profile

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Run migrations and check collaborators on startup"""
    if settings.SHOULD_MIGRATE:
        init_db()
    else:
        logger.info("Skipping automatic database migration (SHOULD_MIGRATE=false)")

    if not settings.SMTP_HOST:
        if settings.is_local:
            logger.warning("SMTP_HOST not set; password reset codes will only be logged")
        else:
            logger.error("SMTP_HOST not set; password reset codes cannot be delivered")

    # A configured but unusable service account stops startup
    if settings.FIREBASE_SERVICE_KEY_PATH:
        get_claims_verifier().initialize()
    else:
        logger.warning("FIREBASE_SERVICE_KEY_PATH not set; using application default credentials")
    yield


app = FastAPI(
    title="Auth Service",
    description="Credential authentication and password reset",
    version="1.0.0",
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(_request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid input", "details": jsonable_encoder(exc.errors())},
    )


# Include routers
app.include_router(health.router)
app.include_router(auth.router)
app.include_router(profile.router)


def run():
    import uvicorn

    logger.info("Server starting on :%s", settings.PORT)
    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)
