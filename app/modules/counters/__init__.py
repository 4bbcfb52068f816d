# app/modules/counters/__init__.py
"""
Módulo de Contadores - secuencias monotónicas por tipo de transferencia

Los contadores se aprovisionan fuera de banda (scripts/setup_transfer_references.py)
y nunca se crean automáticamente al incrementar.
"""

from .repository import CounterRepository, format_transfer_no

__all__ = [
    "CounterRepository",
    "format_transfer_no"
]
