# app/core/exceptions.py
from fastapi import HTTPException, status


class BadRequestError(HTTPException):
    """Entrada inválida o semánticamente incorrecta (config faltante, stock insuficiente...)"""
    def __init__(self, detail: str = "Bad request"):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail
        )

    def __str__(self) -> str:
        return str(self.detail)


class NotFoundError(HTTPException):
    """La entidad referenciada (división, escuela, stock, activo, usuario, contador, transferencia) no existe"""
    def __init__(self, detail: str = "Resource not found"):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail
        )

    def __str__(self) -> str:
        return str(self.detail)
