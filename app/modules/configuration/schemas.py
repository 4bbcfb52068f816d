# app/modules/configuration/schemas.py
from pydantic import BaseModel, Field


class TransferReportConfig(BaseModel):
    """Configuración requerida para emitir reportes de transferencia"""
    entity_name: str = Field(..., min_length=1)
    fund_cluster_sep: str = Field(..., min_length=1)
    fund_cluster_ppe: str = Field(..., min_length=1)

    def fund_cluster_for(self, transfer_type: str) -> str:
        # PTR usa el fund cluster de PPE; cualquier otro tipo usa SEP
        if transfer_type == "property-transfer-report":
            return self.fund_cluster_ppe
        return self.fund_cluster_sep
