# app/main.py
import logging
from fastapi import FastAPI
from contextlib import asynccontextmanager

from app.config.settings import settings
from app.config.database import SessionLocal, engine
from app.core.exceptions import BadRequestError
from app.core.middleware import setup_middleware, setup_exception_handlers
from app.modules.configuration import ConfigurationRepository
from app.api.v1.router import api_router

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def load_report_config(app: FastAPI) -> None:
    """Cargar Entity Name + Fund Clusters una vez; si faltan se reintenta por request"""
    db = SessionLocal()
    try:
        app.state.report_config = ConfigurationRepository(db).get_transfer_report_config()
        logger.info(f"📋 Configuración de reportes cargada: {app.state.report_config.entity_name}")
    except BadRequestError as e:
        logger.warning(f"⚠️ Configuración de reportes no disponible al iniciar: {e}")
        app.state.report_config = None
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("🚀 Property Transfer API Starting...")
    logger.info(f"📍 Version: {settings.version}")
    logger.info(f"🌍 Environment: {'Development' if settings.debug else 'Production'}")
    logger.info(f"🗄️  Database: {settings.database_url.split('@')[1] if '@' in settings.database_url else settings.database_url}")

    load_report_config(app)

    yield

    # Shutdown
    logger.info("🛑 Property Transfer API Shutting down...")
    engine.dispose()

# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.version,
    description="Flujo de reportes de transferencia de inventario y propiedad (ITR / PTR)",
    docs_url="/docs",
    redoc_url="/redoc" if settings.debug else None,
    lifespan=lifespan
)

# Setup middleware
setup_middleware(app)
setup_exception_handlers(app)

# Include routers
app.include_router(api_router, prefix="/api/v1")

# Root endpoint
@app.get("/")
async def root():
    return {
        "message": "🚀 Property Transfer API",
        "version": settings.version,
        "status": "running",
        "environment": "production" if not settings.debug else "development",
        "docs": "/docs",
        "api": "/api/v1"
    }

# Health check
@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "version": settings.version,
        "app": settings.app_name,
        "environment": "production" if not settings.debug else "development"
    }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
