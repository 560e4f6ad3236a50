"""FastAPI application factory for the Studio content API"""

import time
from pathlib import Path
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from studio_cms import __version__
from studio_cms.auth.tokens import TokenService
from studio_cms.services.content_service import ContentService
from studio_cms.services.document_store import ContentRepository, DocumentStore
from studio_cms.services.inquiry_service import InquiryService
from studio_cms.services.upload_service import UploadService
from studio_cms.services.user_store import UserStore
from studio_cms.utils.config import DEV_JWT_SECRET, ConfigManager, Settings
from studio_cms.utils.files import ensure_directory
from studio_cms.utils.logger import get_logger, setup_logger

from .auth_routes import router as auth_router
from .content_routes import router as content_router
from .inquiry_routes import router as inquiry_router
from .middleware import RateLimitMiddleware, RequestGateMiddleware, SecurityHeadersMiddleware
from .responses import register_exception_handlers
from .upload_routes import router as upload_router

logger = get_logger(__name__)

USERS_FILE_NAME = "users.json"


def _warn_on_dev_secret(settings: Settings) -> None:
    if settings.auth.jwt_secret != DEV_JWT_SECRET:
        return
    logger.warning("Using the development JWT secret; set JWT_SECRET before deploying")
    if settings.is_production:
        logger.error("Development JWT secret in use in production", environment=settings.app.environment)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the app: stores, services, middleware and routers from ``settings``"""
    if settings is None:
        settings = ConfigManager().load_settings()

    setup_logger(
        log_level=settings.logging.level,
        log_format=settings.logging.format,
        file_path=settings.logging.file_path,
        max_bytes=settings.logging.max_bytes,
        backup_count=settings.logging.backup_count,
    )
    _warn_on_dev_secret(settings)

    data_dir = ensure_directory(Path(settings.storage.data_path))
    images_dir = ensure_directory(settings.storage.images_dir)
    uploads_dir = ensure_directory(settings.storage.uploads_dir)

    user_store = UserStore(data_dir / USERS_FILE_NAME, bcrypt_rounds=settings.auth.bcrypt_rounds)
    user_store.ensure_default_admin(
        settings.auth.admin_username,
        settings.auth.admin_password,
        settings.auth.admin_email,
    )

    app = FastAPI(
        title=settings.app.name,
        description="Content API for the studio website",
        version=__version__,
    )
    app.state.settings = settings
    app.state.user_store = user_store
    app.state.token_service = TokenService(settings.auth.jwt_secret, ttl_hours=settings.auth.token_ttl_hours)
    app.state.content_service = ContentService(ContentRepository(DocumentStore(data_dir)))
    app.state.upload_service = UploadService(
        images_dir=images_dir,
        uploads_dir=uploads_dir,
        max_size=settings.upload.max_size,
        allowed_types=settings.upload.allowed_types,
    )
    app.state.inquiry_service = InquiryService(settings.mail)
    app.state.started_at = time.monotonic()

    register_exception_handlers(app)

    # add_middleware wraps: the last one added runs first
    app.add_middleware(RequestGateMiddleware)
    if settings.rate_limit.enabled:
        app.add_middleware(
            RateLimitMiddleware,
            window_seconds=settings.rate_limit.window_seconds,
            auth_max=settings.rate_limit.auth_max,
            api_max=settings.rate_limit.api_max,
        )
    app.add_middleware(SecurityHeadersMiddleware, production=settings.is_production)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    app.include_router(auth_router)
    app.include_router(upload_router)
    app.include_router(inquiry_router)
    app.include_router(content_router)
    app.mount("/images", StaticFiles(directory=str(images_dir)), name="images")

    logger.info(
        "Application configured",
        environment=settings.app.environment,
        data_path=str(data_dir),
        rate_limit=settings.rate_limit.enabled,
        mail=settings.mail.configured,
    )
    return app
