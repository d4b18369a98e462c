"""FastAPI application entrypoint for the Private Dining Service."""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.config import settings
from core.logging import setup_logging
from db.session import close_db, get_session_context, init_db
from services.seed_loader import load_seed_data
from apps.api.errors import register_exception_handlers
from apps.api.routers import reservations, restaurants


logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the schema and seed an empty database on startup; release connections on shutdown."""
    setup_logging()

    try:
        init_db()
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        raise

    if settings.seed_file_path:
        with get_session_context() as session:
            seeded = load_seed_data(session, settings.seed_file_path)
        logger.info(
            f"Seed file {settings.seed_file_path}: {seeded.restaurants} restaurant(s), "
            f"{seeded.reservations} reservation(s) inserted"
        )

    logger.info(f"{settings.app_name} started ({settings.app_env})")

    yield

    close_db()
    logger.info(f"{settings.app_name} stopped")


app = FastAPI(
    title=settings.app_name,
    description="Private dining reservations with capacity control and occupancy analytics",
    version=API_VERSION,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(restaurants.router, prefix=settings.api_prefix)
app.include_router(reservations.router, prefix=settings.api_prefix)


@app.get("/")
async def root():
    """Service banner."""
    return {"app": settings.app_name, "status": "running", "version": API_VERSION}


@app.get("/health")
async def health_check():
    return {"status": "healthy", "environment": settings.app_env}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("apps.api.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
