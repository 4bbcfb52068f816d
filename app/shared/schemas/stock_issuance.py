# app/shared/schemas/stock_issuance.py

"""
Schemas para emisión de stock por lote (kardex de activos)
"""

from pydantic import BaseModel, Field
from typing import Optional

from app.shared.database.models import GOOD_CONDITION, TRANSFERRED


class BatchItem(BaseModel):
    """
    Entrada de un lote de emisión: una por unidad de stock transferida.

    El balance ya viene calculado por el motor de transferencias (balance
    corrido por activo); el servicio de inventario solo lo registra.
    """
    asset_id: int = Field(..., description="ID del activo dueño de la unidad")
    stock_id: Optional[int] = Field(None, description="Unidad de stock de origen")
    reference: str = Field(default="")
    serial_no: str = Field(default="")
    qty: int = Field(default=1, gt=0)
    balance: int = Field(..., description="Balance del activo después de esta unidad")
    item_no: str = Field(default="")
    initial_condition: str = Field(default="")
    condition: str = Field(default=TRANSFERRED)

    @property
    def deducts_balance(self) -> bool:
        # Solo las unidades en buena condición descuentan del activo
        return self.initial_condition == GOOD_CONDITION
