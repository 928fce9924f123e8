import logging
import sys
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from videohub.api.errors import register_exception_handlers
from videohub.api.likes import router as likes_router
from videohub.api.playlists import router as playlists_router
from videohub.api.videos import router as videos_router
from videohub.core.config import settings
from videohub.core.database import Database
from videohub.services.storage import S3AssetStore

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)

app = FastAPI(title="Videohub API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)
app.include_router(videos_router)
app.include_router(playlists_router)
app.include_router(likes_router)


@app.on_event("startup")
def startup_event():
    """Open the database and the asset store client."""
    logger.info("=" * 60)
    logger.info("Starting application startup sequence...")
    logger.info(f"Python version: {sys.version}")
    logger.info(f"DB_URL endpoint: {settings.db_url.split('@')[-1] if '@' in settings.db_url else 'Not set'}")

    try:
        app.state.database = Database(settings.db_url).open()
        logger.info("✓ Database opened")
    except Exception as e:
        logger.error(f"✗ Failed to open database: {e}", exc_info=True)
        raise

    app.state.asset_store = S3AssetStore()
    logger.info(f"✓ Asset store ready: s3://{settings.s3_bucket}")
    logger.info("=" * 60)


@app.on_event("shutdown")
def shutdown_event():
    database = getattr(app.state, "database", None)
    if database is not None:
        database.close()
    logger.info("Application shutdown complete")


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/ready")
async def ready():
    return {"status": "ready"}
