# app/modules/users/__init__.py
"""
Módulo de Usuarios - solo resolución de usuarios por ID.
La gestión de usuarios vive fuera de este servicio.
"""

from .repository import UsersRepository

__all__ = ["UsersRepository"]
