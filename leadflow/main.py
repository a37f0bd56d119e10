"""LeadFlow — FastAPI application factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from leadflow.adapters.persistence.database import engine
from leadflow.config import settings
from leadflow.infrastructure.api.routes_allocation import router as allocation_router
from leadflow.infrastructure.api.routes_allocation import rules_router
from leadflow.infrastructure.api.routes_employees import router as employees_router
from leadflow.infrastructure.api.routes_health import router as health_router
from leadflow.infrastructure.api.routes_leads import router as leads_router
from leadflow.infrastructure.api.routes_product_groups import router as product_groups_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    try:
        async with engine.begin():
            pass  # Connection pool warmed up
        logger.info("Database connection established")
    except Exception as e:
        logger.warning("Database not available on startup: %s", e)
    yield
    await engine.dispose()


def create_app() -> FastAPI:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s | %(message)s",
    )

    app = FastAPI(
        title="LeadFlow — Lead Allocation Engine",
        description="Rule-based and round-robin assignment of sales leads",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register routers
    app.include_router(health_router, prefix="/api")
    app.include_router(leads_router, prefix="/api")
    app.include_router(rules_router, prefix="/api")
    app.include_router(allocation_router, prefix="/api")
    app.include_router(employees_router, prefix="/api")
    app.include_router(product_groups_router, prefix="/api")

    return app


app = create_app()
