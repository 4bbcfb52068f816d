# app/modules/transfers/schemas.py
from pydantic import BaseModel, Field, validator
from typing import Optional, List
from datetime import datetime
from enum import Enum
from app.shared.schemas.common import BaseResponse, PaginatedResponse


class TransferReportType(str, Enum):
    """Tipos de reporte de transferencia (conjunto cerrado)"""
    INVENTORY = "inventory-transfer-report"
    PROPERTY = "property-transfer-report"


class TransferStatus(str, Enum):
    """Estados del reporte; solo avanzan hacia adelante"""
    PENDING = "pending"
    APPROVED = "approved"
    COMPLETED = "completed"


class ItemStockRef(BaseModel):
    stock_id: int = Field(..., gt=0, description="ID de la unidad de stock")


def _unique_stock_ids(items: Optional[List[ItemStockRef]]) -> Optional[List[ItemStockRef]]:
    if items is None:
        return items
    stock_ids = [item.stock_id for item in items]
    if len(stock_ids) != len(set(stock_ids)):
        raise ValueError("Duplicated stock IDs in item_stocks")
    return items


class TransferCreate(BaseModel):
    type: TransferReportType = Field(..., description="inventory-transfer-report | property-transfer-report")
    from_office: str = Field(..., alias="from", min_length=1, description="Oficina origen")
    division_id: int = Field(..., gt=0, description="ID de la división destino")
    school: Optional[str] = Field(default="", description="ID o nombre de la escuela destino")
    transfer_reason: str = Field(..., min_length=1)
    transfer_type: str = Field(..., min_length=1, description="donation, relocate, reassignment, others")
    item_stocks: List[ItemStockRef] = Field(..., min_length=1, description="Unidades a transferir, en orden")

    @validator('school')
    def validate_school(cls, v):
        # En blanco equivale a "sin escuela": el destino es solo la división
        return (v or "").strip()

    @validator('item_stocks')
    def validate_item_stocks(cls, v):
        return _unique_stock_ids(v)

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "type": "property-transfer-report",
                "from": "Supply Office",
                "division_id": 1,
                "school": "Rizal Elementary School",
                "transfer_reason": "Reassignment of equipment",
                "transfer_type": "reassignment",
                "item_stocks": [{"stock_id": 10}, {"stock_id": 11}]
            }
        }


class TransferUpdate(BaseModel):
    """Parche genérico previo a la completación"""
    transfer_reason: Optional[str] = Field(None, min_length=1)
    transfer_type: Optional[str] = Field(None, min_length=1)
    item_stocks: Optional[List[ItemStockRef]] = Field(None, min_length=1)
    approved_by: Optional[int] = Field(None, gt=0)
    issued_by: Optional[int] = Field(None, gt=0)
    received_by_name: Optional[str] = Field(None, min_length=1)
    received_by_designation: Optional[str] = Field(None, min_length=1)

    @validator('item_stocks')
    def validate_item_stocks(cls, v):
        return _unique_stock_ids(v)


class TransferApprove(BaseModel):
    approved_by: int = Field(..., gt=0, description="ID del usuario que aprueba")


class TransferComplete(BaseModel):
    issued_by: int = Field(..., gt=0, description="ID del usuario que emite")
    received_by_name: str = Field(..., min_length=1)
    received_by_designation: str = Field(..., min_length=1)


# ==================== RESPUESTAS ====================

class TransferItemDetail(BaseModel):
    stock_id: int
    item_no: str = ""
    condition: str = ""
    reference: Optional[str] = None
    serial_no: str = ""
    stock_number: str = ""
    description: str = ""
    unit_of_measurement: str = ""
    cost: float = 0
    created_at: Optional[datetime] = None


class TransferDetail(BaseModel):
    id: int
    type: str
    entity_name: str
    fund_cluster: str
    from_office: str = Field(..., alias="from")
    to: str
    division_id: int
    school_id: Optional[int] = None
    transfer_no: str
    transfer_reason: str = ""
    transfer_type: str = ""
    status: str
    item_stocks: List[TransferItemDetail]
    approved_by: Optional[int] = None
    approved_by_name: Optional[str] = None
    approved_by_designation: Optional[str] = None
    approved_at: Optional[datetime] = None
    issued_by: Optional[int] = None
    issued_by_name: Optional[str] = None
    issued_by_designation: Optional[str] = None
    received_by_name: str = ""
    received_by_designation: str = ""
    completed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        populate_by_name = True


class TransferSummary(BaseModel):
    id: int
    type: str
    transfer_no: str
    from_office: str = Field(..., alias="from")
    to: str
    transfer_type: str = ""
    status: str
    created_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    class Config:
        populate_by_name = True


class TransferListResponse(PaginatedResponse):
    items: List[TransferSummary]


class TransferCreateResponse(BaseResponse):
    transfer_id: int
    transfer_no: str
    status: str


class TransferActionResponse(BaseResponse):
    transfer: TransferDetail
