# app/modules/transfers/router.py
from typing import Optional
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from app.config.database import get_db
from app.config.settings import settings
from app.modules.configuration import TransferReportConfig
from .service import TransfersService
from .schemas import (
    TransferCreate, TransferCreateResponse, TransferUpdate, TransferApprove,
    TransferComplete, TransferActionResponse, TransferDetail, TransferListResponse,
    TransferReportType
)

router = APIRouter()


def get_report_config(request: Request) -> Optional[TransferReportConfig]:
    """Configuración de reportes cargada al iniciar la app (None si aún no existe)"""
    return getattr(request.app.state, "report_config", None)


@router.post("/", response_model=TransferCreateResponse)
async def create_transfer(
    transfer_data: TransferCreate,
    report_config: Optional[TransferReportConfig] = Depends(get_report_config),
    db: Session = Depends(get_db)
):
    """
    Crear reporte de transferencia (ITR / PTR)

    **Proceso (una sola transacción):**
    - Valida división y resuelve/crea la escuela destino
    - Genera número de transferencia `YYYY-MM-DD-NN`
    - Valida que cada unidad exista y que haya balance para las de buena condición
    - Guarda el reporte en estado `pending`
    """
    service = TransfersService(db, report_config)
    return await service.create_transfer(transfer_data)


@router.get("/health")
async def transfers_health():
    """Health check del módulo de transferencias"""
    return {
        "service": "transfers",
        "status": "healthy",
        "version": settings.version,
        "features": [
            "Creación de ITR / PTR con numeración atómica",
            "Aprobación",
            "Completación con emisión de stock por lote",
            "Tracking completo de estado"
        ]
    }


@router.get("/id/{transfer_id}", response_model=TransferDetail)
async def get_transfer_by_id(
    transfer_id: int,
    db: Session = Depends(get_db)
):
    """Detalle del reporte con unidades en su orden original"""
    service = TransfersService(db)
    return await service.get_transfer_by_id(transfer_id)


@router.patch("/id/{transfer_id}", response_model=TransferDetail)
async def update_transfer(
    transfer_id: int,
    update_data: TransferUpdate,
    db: Session = Depends(get_db)
):
    """
    Parche genérico previo a la completación

    - `item_stocks` solo puede reordenar/reducir unidades que ya pertenecen al reporte
    - `approved_by` sella `approved_at`
    - `issued_by` + `received_by_*` sellan `completed_at` (sin emitir stock)
    """
    service = TransfersService(db)
    return await service.update_transfer(transfer_id, update_data)


@router.put("/id/{transfer_id}/approved", response_model=TransferActionResponse)
async def approve_transfer(
    transfer_id: int,
    approve_data: TransferApprove,
    db: Session = Depends(get_db)
):
    """Marcar el reporte como aprobado"""
    service = TransfersService(db)
    return await service.approve_transfer(transfer_id, approve_data)


@router.put("/id/{transfer_id}/completed", response_model=TransferActionResponse)
async def complete_transfer(
    transfer_id: int,
    complete_data: TransferComplete,
    db: Session = Depends(get_db)
):
    """
    Completar el reporte y emitir el stock al destino

    **Efectos:**
    - Números de item y balances calculados en el orden guardado
    - Descuento de balance solo para unidades en buena condición
    - Kardex `transferred` registrado en la oficina destino
    """
    service = TransfersService(db)
    return await service.complete_transfer(transfer_id, complete_data)


@router.get("/{transfer_type}", response_model=TransferListResponse)
async def get_transfers(
    transfer_type: TransferReportType,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_limit, ge=10, le=settings.max_page_limit),
    search: str = Query(""),
    sort_by: str = Query("id"),
    sort_order: str = Query("desc", pattern="^(asc|desc)$"),
    db: Session = Depends(get_db)
):
    """Listado paginado de reportes por tipo"""
    service = TransfersService(db)
    return await service.get_transfers(
        transfer_type.value, page=page, limit=limit, search=search,
        sort_by=sort_by, sort_order=sort_order
    )
