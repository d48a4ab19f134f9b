"""
Main Application Entry Point.

This module initializes the FastAPI application, configures middleware,
exception handlers and monitoring, and includes all API routers.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from empowered_camps.core.database import init_db
from empowered_camps.core.logging_config import get_logger, setup_logging
from empowered_camps.core.monitoring import initialize_logfire

from .api.v1 import (
    analytics,
    camps,
    certifications,
    cit,
    cron,
    curriculum,
    email_templates,
    health,
    jobs,
    licensees,
    promo_codes,
    reconciliation,
    registrations,
    royalties,
    settings as platform_settings,
    waitlist,
    webhooks,
)
from .core import constant
from .core.config import settings
from .exception_handlers import setup_exception_handlers
from .middleware import LogfireMiddleware

# Initialize logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Verify the database on startup and log shutdown."""
    try:
        logger.info("Starting up Empowered Camps Server...")
        await init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}", exc_info=True)

    yield

    logger.info("Shutting down Empowered Camps Server...")


app = FastAPI(
    title=constant.PROJECT_NAME,
    description="""
    Empowered Camps Platform API

    Backend for licensed youth sports camps: licensees and camp sessions,
    registration checkout and Stripe payments, royalty invoicing, HQ analytics,
    platform settings, email templates, curriculum and staffing.
    """,
    version=constant.API_VERSION,
    openapi_url=f"{constant.API_V1_STR}/openapi.json",
    docs_url=f"{constant.API_V1_STR}/docs",
    redoc_url=f"{constant.API_V1_STR}/redoc",
    lifespan=lifespan,
)

initialize_logfire(app)
setup_exception_handlers(app)

app.add_middleware(LogfireMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors.origins,
    allow_credentials=settings.cors.allow_credentials,
    allow_methods=settings.cors.allow_methods,
    allow_headers=settings.cors.allow_headers,
)

API = constant.API_V1_STR

app.include_router(health.router, tags=["health"])
app.include_router(licensees.router, prefix=f"{API}/admin/licensees", tags=["licensees"])
app.include_router(camps.router, prefix=f"{API}/camps", tags=["camps"])
app.include_router(registrations.router, prefix=f"{API}/registrations", tags=["registrations"])
app.include_router(webhooks.router, prefix=f"{API}/webhooks", tags=["webhooks"])
app.include_router(reconciliation.router, prefix=f"{API}/admin/stripe-reconcile", tags=["payments"])
app.include_router(promo_codes.router, prefix=f"{API}/promo-codes", tags=["promo-codes"])
app.include_router(royalties.router, prefix=f"{API}/admin/royalties", tags=["royalties"])
app.include_router(cron.router, prefix=f"{API}/cron", tags=["cron"])
app.include_router(analytics.router, prefix=f"{API}/admin/analytics", tags=["analytics"])
app.include_router(platform_settings.router, prefix=f"{API}/admin/settings", tags=["settings"])
app.include_router(email_templates.router, prefix=f"{API}/email-templates", tags=["email-templates"])
app.include_router(curriculum.router, prefix=f"{API}/curriculum", tags=["curriculum"])
app.include_router(cit.router, prefix=f"{API}/cit/applications", tags=["cit"])
app.include_router(certifications.router, prefix=f"{API}/certifications", tags=["certifications"])
app.include_router(jobs.router, prefix=f"{API}/jobs", tags=["jobs"])
app.include_router(jobs.admin_router, prefix=f"{API}/admin/jobs", tags=["jobs"])
app.include_router(waitlist.router, prefix=f"{API}/waitlist", tags=["waitlist"])
