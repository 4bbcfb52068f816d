# app/modules/configuration/__init__.py
"""
Módulo de Configuración - valores nombrados usados en los reportes

- repository.py: lectura/escritura de configuraciones por nombre
- schemas.py: TransferReportConfig tipado (Entity Name + Fund Clusters)
"""

from .repository import ConfigurationRepository
from .schemas import TransferReportConfig

__all__ = [
    "ConfigurationRepository",
    "TransferReportConfig"
]
