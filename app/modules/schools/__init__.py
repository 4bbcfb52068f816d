# app/modules/schools/__init__.py
"""
Módulo de Escuelas y Divisiones - resolución de destinos

El CRUD de escuelas/divisiones vive fuera de este servicio; aquí solo se
resuelven (y, si hace falta, se crean) las escuelas destino de una transferencia.

Arquitectura:
- service.py: find_or_create_school
- repository.py: acceso a datos de escuelas y divisiones
"""

from .service import SchoolsService
from .repository import SchoolsRepository

__all__ = [
    "SchoolsService",
    "SchoolsRepository"
]
