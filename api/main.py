"""
Julyu SEO Audit Service

FastAPI app that:
1. Mounts the admin SEO audit routes
2. Creates the audit history tables on startup
3. Reports health, including database status
"""

import logging
import sys
from datetime import datetime

from fastapi import FastAPI

from seo_audit import __version__
from seo_audit.config import get_settings
from seo_audit.database import init_db, check_db_connection

from .seo_audit import router as seo_audit_router

# Configure logging to stdout (the host treats stderr as errors)
logging.basicConfig(
    level=get_settings().LOG_LEVEL.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    stream=sys.stdout,
    force=True,
)
logger = logging.getLogger(__name__)

# Quiet down chatty loggers
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)

app = FastAPI(
    title="Julyu SEO Audit",
    description="SEO, GEO, AEO and CRO audit of the public Julyu site",
    version=__version__,
)

app.include_router(seo_audit_router)


# ============================================================================
# STARTUP - Initialize Database
# ============================================================================

@app.on_event("startup")
async def startup_event():
    """Initialize database on startup."""
    logger.info("Initializing database...")
    try:
        init_db()
        if check_db_connection():
            logger.info("Database connection verified")
        else:
            logger.warning("Database connection check failed - continuing anyway")
    except Exception as e:
        # Audits still run; only history endpoints need the database
        logger.error(f"Database initialization failed: {e}")


# ============================================================================
# HEALTH
# ============================================================================

@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "Julyu SEO Audit"}


@app.get("/api/health")
async def health():
    """Detailed health check including database status."""
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "version": __version__,
        "database": "connected" if check_db_connection() else "disconnected",
    }
