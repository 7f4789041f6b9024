# app/main.py
# Start backend using uvicorn app.main:app --reload --host 0.0.0.0
import logging
import logging.config
import logging.handlers
import json
import pathlib
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.routing import APIRoute
from app.core.config import settings
from app.api import categories as categories_router
from app.api import games as games_router
from app.api import validation as validation_router
from app.crud import crud_category
from app.db.base import Base
from app.db.session import SessionLocal, engine

_queue_handler_instance: Optional[logging.handlers.QueueHandler] = None # Module-level variable

def point_file_handlers_at(config: dict, log_dir: pathlib.Path) -> dict:
    """Moves every handler with a "filename" into log_dir, keeping the file name."""
    for handler in config.get("handlers", {}).values():
        if "filename" in handler:
            handler["filename"] = str(log_dir / pathlib.Path(handler["filename"]).name)
    return config

def configure_logging_from_file():
    """Loads logging configuration from the JSON file and identifies the QueueHandler."""
    global _queue_handler_instance
    config_file = pathlib.Path(__file__).parent / "logging_config.json"
    try:
        with open(config_file) as f_in:
            config = json.load(f_in)

        log_dir = pathlib.Path(settings.LOG_DIR)
        log_dir.mkdir(parents=True, exist_ok=True)
        point_file_handlers_at(config, log_dir)

        logging.config.dictConfig(config)

        # Find the QueueHandler instance to start/stop its listener later
        root_logger = logging.getLogger()
        for handler in root_logger.handlers:
            if isinstance(handler, logging.handlers.QueueHandler):
                _queue_handler_instance = handler
                break

        if not _queue_handler_instance:
            logging.getLogger("app.main.logging_setup_check").warning(
                "QueueHandler not found in root logger. Off-thread logging will not work as intended."
            )
    except FileNotFoundError:
        print(f"ERROR: Logging configuration file not found at {config_file}. Falling back to basic stdout logging.")
        logging.basicConfig(level=logging.INFO, format='%(levelname)-8s [%(name)s] %(message)s')
    except (json.JSONDecodeError, ValueError) as e:
        print(f"ERROR: Failed to configure logging from {config_file}: {e}. Falling back to basic stdout logging.")
        logging.basicConfig(level=logging.INFO, format='%(levelname)-8s [%(name)s] %(message)s')
        logging.getLogger("app.main.logging_setup_fallback").warning("Logging configuration failed.", exc_info=True)

# Configure logging when the module is loaded. Listener is started/stopped by lifespan.
configure_logging_from_file()
logger = logging.getLogger("app.main") # Logger for this module

def create_tables():
    Base.metadata.create_all(bind=engine)
create_tables()

def seed_categories():
    db = SessionLocal()
    try:
        crud_category.seed_predefined_categories(db)
    finally:
        db.close()

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application startup sequence initiated...")
    if _queue_handler_instance and getattr(_queue_handler_instance, 'listener', None):
        try:
            _queue_handler_instance.listener.start()
            logger.info("Logging QueueListener started successfully via lifespan.")
        except Exception as e:
            logger.error(f"Failed to start QueueListener in lifespan: {e}", exc_info=True)

    seed_categories()
    yield  # This is where the application will run

    logger.info("Application shutdown sequence initiated...")
    for game in list(games_router.active_games.values()):
        if game.countdown:
            game.countdown.cancel()
    games_router.active_games.clear()

    if _queue_handler_instance and getattr(_queue_handler_instance, 'listener', None):
        try:
            _queue_handler_instance.listener.stop()
        except Exception as e:
            print(f"ERROR: Failed to stop QueueListener gracefully: {e}")

app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    lifespan=lifespan,
)

# Include Routers
app.include_router(categories_router.router, prefix=settings.API_V1_STR + "/categories", tags=["Categories"])
app.include_router(validation_router.router, prefix=settings.API_V1_STR + "/validation", tags=["Validation"])
app.include_router(games_router.router, prefix=settings.API_V1_STR + "/games", tags=["Games"])

logger.debug("--- FastAPI Registered Routes ---")
for route in app.routes:
    if isinstance(route, APIRoute):
        logger.debug(f"Path: {route.path}, Methods: {route.methods}, Name: {route.name}")

@app.get(settings.API_V1_STR + "/health", tags=["Health Check"])
async def health_check():
    return {"status": "healthy", "project": settings.PROJECT_NAME}

# For development with uvicorn: uvicorn app.main:app --reload
