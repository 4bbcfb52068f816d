# app/api/v1/router.py
from fastapi import APIRouter
from app.modules.transfers.router import router as transfers_router


# Crear router principal de la API v1
api_router = APIRouter()

# ==================== RUTAS ====================

api_router.include_router(
    transfers_router,
    prefix="/transfers",
    tags=["Transfers"]
)

# ==================== ENDPOINTS RAÍZ ====================

@api_router.get("/")
async def api_root():
    """Root endpoint de la API"""
    return {
        "message": "Property Transfer API v1",
        "status": "active",
        "docs": "/docs",
        "available_endpoints": {
            "transfers": "/api/v1/transfers"
        }
    }
