# app/modules/transfers/__init__.py
"""
Módulo de Transferencias - Reportes ITR / PTR

Este módulo maneja el flujo completo de un reporte de transferencia:
- Creación con número de transferencia atómico (YYYY-MM-DD-NN)
- Aprobación
- Completación con emisión de stock por lote (balance corrido por activo)
- Tracking completo de estado (pending -> approved -> completed)

Arquitectura:
- router.py: Endpoints de transferencias
- service.py: Lógica de negocio (motor del flujo)
- issuance.py: Cálculo del lote de emisión
- repository.py: Acceso a datos de transferencias
- schemas.py: Modelos de request/response
"""

from .router import router
from .service import TransfersService
from .repository import TransfersRepository

__all__ = [
    "router",
    "TransfersService",
    "TransfersRepository"
]
