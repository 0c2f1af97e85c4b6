"""keydash backend - API key dashboard and GitHub summarizer entry point."""

import sentry_sdk
from fastapi import FastAPI
from fastapi.concurrency import asynccontextmanager
from fastapi.exceptions import RequestValidationError
from fastapi.routing import APIRoute
from loguru import logger
from starlette.middleware.cors import CORSMiddleware

from keydash.core.application import security as app_security
from keydash.core.config import settings
from keydash.core.domain.exceptions import DomainException
from keydash.core.infrastructure.ai import check_ai_service_health
from keydash.core.infrastructure.database.session import Database
from keydash.core.infrastructure.health import HealthStatus
from keydash.core.infrastructure.logging import setup_logging
from keydash.core.infrastructure.security import session_auth
from keydash.core.interfaces.http.exceptions import (
    domain_exception_handler,
    global_exception_handler,
    request_validation_exception_handler,
)
from keydash.core.interfaces.http.routers import api_router
from keydash.modules.api_keys.application import dependencies as api_keys_app_deps
from keydash.modules.api_keys.infrastructure import dependencies as api_keys_infra_deps
from keydash.modules.api_keys.infrastructure.models import ApiKeyModel  # noqa: F401
from keydash.modules.summarizer.application import (
    dependencies as summarizer_app_deps,
)
from keydash.modules.summarizer.infrastructure import (
    dependencies as summarizer_infra_deps,
)
from keydash.modules.users.application import dependencies as users_app_deps
from keydash.modules.users.infrastructure import dependencies as users_infra_deps
from keydash.modules.users.infrastructure.models import UserModel  # noqa: F401

VERSION = "0.1.0"


def custom_generate_unique_id(route: APIRoute) -> str:
    """Generate unique operation IDs for OpenAPI."""
    if route.tags:
        return f"{route.tags[0]}-{route.name}"
    return route.name


# Initialize Sentry if configured
if settings.SENTRY_DSN and settings.ENVIRONMENT != "local":
    sentry_sdk.init(
        dsn=str(settings.SENTRY_DSN),
        enable_tracing=True,
        environment=settings.ENVIRONMENT,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    setup_logging()
    logger.info("Starting keydash backend...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")

    database = Database.from_settings(settings)
    await database.connect()
    if settings.DB_AUTO_MIGRATE:
        await database.run_migrations()
    app.state.db = database

    yield

    logger.info("Shutting down keydash backend...")
    await database.dispose()


app = FastAPI(
    title=settings.PROJECT_NAME,
    description=(
        "API key dashboard and GitHub repository summaries\n\n"
        "## Authentication\n\n"
        "- **Session Bearer**: `Authorization: Bearer <session token>`\n"
        "- **API Key**: `apiKey` in the `/github-summarizer` body, billed once per success"
    ),
    version=VERSION,
    openapi_url=f"{settings.API_PREFIX}/openapi.json",
    docs_url=f"{settings.API_PREFIX}/docs",
    redoc_url=f"{settings.API_PREFIX}/redoc",
    root_path=settings.ROOTPATH,
    generate_unique_id_function=custom_generate_unique_id,
    lifespan=lifespan,
)

# Dependency overrides (application -> infrastructure)
app.dependency_overrides[app_security.get_current_session] = (
    session_auth.get_current_session
)
app.dependency_overrides[app_security.get_current_user_id] = (
    session_auth.get_current_user_id
)

app.dependency_overrides[users_app_deps.get_user_repository] = (
    users_infra_deps.get_user_repository
)
app.dependency_overrides[users_app_deps.get_user_query_service_scope] = (
    users_infra_deps.get_user_query_service_scope
)

app.dependency_overrides[api_keys_app_deps.get_api_key_repository] = (
    api_keys_infra_deps.get_api_key_repository
)
app.dependency_overrides[api_keys_app_deps.get_api_key_service_scope] = (
    api_keys_infra_deps.get_api_key_service_scope
)

app.dependency_overrides[summarizer_app_deps.get_repository_fetcher] = (
    summarizer_infra_deps.get_repository_fetcher
)
app.dependency_overrides[summarizer_app_deps.get_readme_summarizer] = (
    summarizer_infra_deps.get_readme_summarizer
)

# Exception handlers
app.add_exception_handler(DomainException, domain_exception_handler)
app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)

# CORS middleware
if settings.all_cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.all_cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.include_router(api_router, prefix=settings.API_PREFIX)


@app.get("/health", tags=["health"])
async def health_check():
    """Health check endpoint.

    - healthy: database and AI service are fine (or AI is disabled)
    - degraded: database is fine, AI service is failing
    - unhealthy: database is failing
    """
    db_health_result = await app.state.db.check_health()
    ai_health_result = await check_ai_service_health()

    db_ok = db_health_result.status == HealthStatus.OK
    ai_ok = ai_health_result.status in (HealthStatus.OK, HealthStatus.SKIPPED)

    if db_ok and ai_ok:
        overall_status = "healthy"
    elif db_ok:
        overall_status = "degraded"
    else:
        overall_status = "unhealthy"

    return {
        "status": overall_status,
        "environment": settings.ENVIRONMENT,
        "version": VERSION,
        "components": {
            "database": db_health_result.to_dict(),
            "ai_service": ai_health_result.to_dict(),
        },
        "feature_flags": {
            "llm_enabled": settings.LLM_ENABLED,
            "strict_usage_cap": settings.API_KEY_STRICT_USAGE_CAP,
        },
    }


@app.get("/", tags=["root"])
async def root():
    """Root endpoint."""
    return {
        "message": "Welcome to keydash API",
        "docs": f"{settings.API_PREFIX}/docs",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=settings.SERVER_PORT,
        reload=settings.ENVIRONMENT == "local",
    )
