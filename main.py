import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from core.config import settings
from core.errors import AppError, app_error_handler, generic_exception_handler, validation_exception_handler
from core.log_config import setup_logging
from db.database import Base, engine
from models import content, goal, settings as settings_model, subscriber, user  # noqa: F401  register tables
from routers import (
    admin_content_router,
    admin_goal_router,
    admin_router,
    admin_settings_router,
    admin_user_router,
    auth_router,
    donation_router,
    goal_router,
    post_router,
    prayer_request_router,
    site_router,
    subscriber_router,
)

setup_logging()
logger = logging.getLogger(__name__)

# Initialize the database
Base.metadata.create_all(bind=engine)

app = FastAPI(title=settings.APP_NAME, version=settings.APP_VERSION)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(AppError, app_error_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)

# Public API
app.include_router(donation_router.router, prefix="/api")
app.include_router(goal_router.router, prefix="/api")
app.include_router(prayer_request_router.router, prefix="/api")
app.include_router(post_router.router, prefix="/api")
app.include_router(subscriber_router.router, prefix="/api")
app.include_router(site_router.router, prefix="/api")
app.include_router(auth_router.router, prefix="/api")

# Admin API
app.include_router(admin_router.setup_router, prefix="/api")
app.include_router(admin_router.router, prefix="/api")
app.include_router(admin_user_router.router, prefix="/api")
app.include_router(admin_settings_router.router, prefix="/api")
app.include_router(admin_content_router.router, prefix="/api")
app.include_router(admin_goal_router.router, prefix="/api")

logger.info("%s %s started (%s)", settings.APP_NAME, settings.APP_VERSION, settings.APP_ENV)
