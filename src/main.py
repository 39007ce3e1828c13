"""FastAPI application initialization."""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load environment variables before anything else
load_dotenv()

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.staticfiles import StaticFiles

from src.api.auth import router as auth_router
from src.api.errors import app_error_handler, validation_exception_handler
from src.api.middleware import build_pipeline
from src.api.posts import router as posts_router
from src.api.routes import router
from src.config import Settings, get_settings
from src.database import close_database, init_database
from src.exceptions import AppError, ConfigurationError
from src.services.auth_service import AuthService
from src.services.hashing_service import CredentialHasher
from src.services.logging_service import configure_logging, get_logger
from src.services.post_service import POSTS_COLLECTION, PostService
from src.services.token_service import TokenIssuer
from src.services.upload_service import AssetStore
from src.services.user_service import USERS_COLLECTION, UserDirectory

ASSETS_PREFIX = "/assets"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Connect the document store and build the services on startup.

    A failed connection aborts startup, so the server never runs without
    its database.
    """
    settings: Settings = app.state.settings
    logger = get_logger("main")

    client, database = await init_database(settings)
    users = UserDirectory(database[USERS_COLLECTION])

    app.state.mongo_client = client
    app.state.auth_service = AuthService(
        users=users,
        hasher=CredentialHasher(),
        tokens=app.state.token_issuer,
    )
    app.state.post_service = PostService(database[POSTS_COLLECTION], users)

    logger.info(
        "application_started",
        port=settings.port,
        log_level=settings.log_level,
    )

    yield

    await close_database(client)
    logger.info("application_shutdown")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application with its pipeline, routes and process-wide state.

    Raises:
        ConfigurationError: If the token signing secret is missing
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Social API",
        description="User accounts, login and picture posts",
        version="1.0.0",
        lifespan=lifespan,
        middleware=build_pipeline(settings),
    )

    app.state.settings = settings
    try:
        app.state.token_issuer = TokenIssuer(settings.jwt_secret)
    except ConfigurationError as e:
        get_logger("main").error("startup_failed", error=str(e))
        raise

    asset_store = AssetStore(Path(settings.assets_dir))
    asset_store.ensure_directory()
    app.state.asset_store = asset_store

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    app.mount(
        ASSETS_PREFIX,
        StaticFiles(directory=settings.assets_dir),
        name="assets",
    )

    app.include_router(auth_router)
    app.include_router(posts_router)
    app.include_router(router)

    return app


app = create_app()
