import logging
import os
from contextlib import asynccontextmanager
from logging.handlers import RotatingFileHandler

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .config import settings
from .database import init_db
from .errors import (
    CollaboratorError,
    ConfirmationRequiredError,
    ContractError,
    KotobaError,
    NotFoundError,
    SessionNotFoundError,
    StoreError,
    UserInputError,
)
from .globals import vocab_store
from .log_handler import SQLiteHandler
from .router import router

logger = logging.getLogger("kotoba")


# --- Logging Setup ---
def setup_logging():
    logger.setLevel(logging.INFO)

    if not os.path.exists(settings.LOG_DIR):
        os.makedirs(settings.LOG_DIR, exist_ok=True)
    log_path = os.path.join(settings.LOG_DIR, settings.LOG_FILE)
    if not any(isinstance(h, RotatingFileHandler) for h in logger.handlers):
        file_handler = RotatingFileHandler(log_path, maxBytes=5_000_000, backupCount=3)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")
        )
        logger.addHandler(file_handler)
    if not any(isinstance(h, SQLiteHandler) for h in logger.handlers):
        logger.addHandler(SQLiteHandler())
    # Also configure root logger to see logs from other libraries
    logging.basicConfig(level=logging.INFO)


# --- Error Responses ---
def _status_for(exc: KotobaError) -> int:
    if isinstance(exc, SessionNotFoundError):
        return 401
    if isinstance(exc, NotFoundError):
        return 404
    if isinstance(exc, ConfirmationRequiredError):
        return 409
    if isinstance(exc, UserInputError):
        return 400
    if isinstance(exc, ContractError):
        return 409
    if isinstance(exc, StoreError):
        return 500
    if isinstance(exc, CollaboratorError):
        return 400
    return 500


async def kotoba_error_handler(request: Request, exc: KotobaError):
    status = _status_for(exc)
    if isinstance(exc, (ContractError, StoreError)):
        logger.error(
            f"{request.method} {request.url.path} failed: {exc}", exc_info=exc
        )
    else:
        logger.info(f"{request.method} {request.url.path} rejected: {exc}")
    return JSONResponse({"error": str(exc)}, status_code=status)


# --- Lifecycle ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Loaded {len(vocab_store.all_lists())} lists")
    yield


# --- App Factory ---
def create_app() -> FastAPI:
    init_db()
    setup_logging()
    app = FastAPI(
        title=settings.PROJECT_NAME,
        debug=settings.DEBUG,
        lifespan=lifespan,
        root_path=settings.ROOT_PATH,
    )

    app.add_exception_handler(KotobaError, kotoba_error_handler)
    app.include_router(router)

    return app
