import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from project_budget.config import settings
from project_budget.core.errors import register_error_handlers
from project_budget.core.middleware import AccessLogMiddleware, RequestIDMiddleware
from project_budget.routers import budget, currencies, rates

logger = logging.getLogger("project_budget")


@asynccontextmanager
async def lifespan(application: FastAPI):
    """Create database tables on startup if they don't exist."""
    from project_budget.dependencies import engine
    from project_budget.models.base import Base
    # Import all models so Base.metadata is populated
    import project_budget.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables verified/created")
    yield
    await engine.dispose()


app = FastAPI(
    title=settings.app_name,
    version="0.1.0",
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    lifespan=lifespan,
)

# Middleware order matters: last added is outermost and runs first
cors_kwargs = {
    "allow_origins": settings.cors_origins_list,
    "allow_credentials": True,
    "allow_methods": ["*"],
    "allow_headers": ["*"],
    "expose_headers": ["x-request-id"],
}
if settings.cors_allow_origin_regex:
    cors_kwargs["allow_origin_regex"] = settings.cors_allow_origin_regex
app.add_middleware(RequestIDMiddleware)
app.add_middleware(AccessLogMiddleware)
app.add_middleware(CORSMiddleware, **cors_kwargs)

# Error handlers
register_error_handlers(app)

# Routers
app.include_router(budget.router)
app.include_router(rates.router)
app.include_router(currencies.router)


@app.get("/health")
async def health_check():
    return {"status": "ok", "app": settings.app_name, "version": "0.1.0"}
