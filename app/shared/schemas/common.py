# app/shared/schemas/common.py
from pydantic import BaseModel, Field
from typing import Any, List
from datetime import datetime
import math

class BaseResponse(BaseModel):
    success: bool
    message: str = ""
    timestamp: datetime = Field(default_factory=datetime.now)

class PaginatedResponse(BaseModel):
    items: List[Any]
    total: int
    page: int
    limit: int
    pages: int

def paginate(items: List[Any], page: int, limit: int, total: int, response_cls=PaginatedResponse):
    """Empaquetar resultados paginados (page es 1-based)"""
    return response_cls(
        items=items,
        total=total,
        page=page,
        limit=limit,
        pages=math.ceil(total / limit) if limit else 0
    )
