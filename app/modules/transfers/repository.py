# app/modules/transfers/repository.py
from sqlalchemy.orm import Session, selectinload
from sqlalchemy import and_, or_, func
from typing import List, Dict, Any, Optional, Tuple
from datetime import datetime
import logging

from app.shared.database.models import Transfer, TransferItemStock, Stock

logger = logging.getLogger(__name__)

SORTABLE_FIELDS = {
    "id": Transfer.id,
    "created_at": Transfer.created_at,
    "transfer_no": Transfer.transfer_no,
    "status": Transfer.status,
    "completed_at": Transfer.completed_at,
}


class TransfersRepository:
    def __init__(self, db: Session):
        self.db = db

    def create_transfer(self, transfer_data: Dict[str, Any], stock_ids: List[int]) -> Transfer:
        """Insertar transferencia + referencias ordenadas (flush, el commit es del llamador)"""
        transfer = Transfer(
            type=transfer_data['type'],
            entity_name=transfer_data['entity_name'],
            fund_cluster=transfer_data['fund_cluster'],
            from_office=transfer_data['from_office'],
            to=transfer_data['to'],
            division_id=transfer_data['division_id'],
            school_id=transfer_data.get('school_id'),
            transfer_no=transfer_data['transfer_no'],
            transfer_reason=transfer_data.get('transfer_reason', ''),
            transfer_type=transfer_data.get('transfer_type', ''),
            status='pending',
            created_at=datetime.now()
        )
        transfer.item_stocks = [
            TransferItemStock(stock_id=stock_id, position=position)
            for position, stock_id in enumerate(stock_ids)
        ]

        self.db.add(transfer)
        self.db.flush()
        return transfer

    def get_transfer_by_id(self, transfer_id: int, for_update: bool = False) -> Optional[Transfer]:
        """
        Obtener transferencia con sus items (orden por posición).
        for_update=True bloquea la fila del reporte durante la transacción.
        """
        query = self.db.query(Transfer).filter(Transfer.id == transfer_id)
        if for_update:
            return query.with_for_update().populate_existing().first()

        return query.options(
            selectinload(Transfer.item_stocks)
            .selectinload(TransferItemStock.stock)
            .selectinload(Stock.asset),
            selectinload(Transfer.approver),
            selectinload(Transfer.issuer)
        ).first()

    def get_transfers(
        self,
        transfer_type: str,
        page: int = 1,
        limit: int = 10,
        search: str = "",
        sort_by: str = "id",
        sort_order: str = "desc"
    ) -> Tuple[List[Transfer], int]:
        """Listado paginado por tipo con búsqueda por número, destino o tipo de transferencia"""
        filters = [Transfer.type == transfer_type]

        if search:
            pattern = f"%{search.lower()}%"
            filters.append(
                or_(
                    func.lower(Transfer.transfer_no).like(pattern),
                    func.lower(Transfer.to).like(pattern),
                    func.lower(Transfer.transfer_type).like(pattern)
                )
            )

        query = self.db.query(Transfer).filter(and_(*filters))
        total = query.count()

        column = SORTABLE_FIELDS.get(sort_by, Transfer.id)
        order = column.asc() if sort_order == "asc" else column.desc()

        page = page if page > 0 else 1
        items = query.order_by(order, Transfer.id.desc()).offset((page - 1) * limit).limit(limit).all()

        return items, total

    def update_transfer(self, transfer: Transfer, values: Dict[str, Any]) -> Transfer:
        """Aplicar campos sobre la transferencia (flush, sin commit)"""
        for field, value in values.items():
            setattr(transfer, field, value)
        transfer.updated_at = datetime.now()

        self.db.flush()
        return transfer

    def reorder_item_stocks(self, transfer: Transfer, stock_ids: List[int]) -> Transfer:
        """
        Reemplazar la lista de items por un subconjunto reordenado de los mismos
        stock IDs. Las referencias existentes se reutilizan; nunca se agregan nuevas.
        """
        by_stock = {item.stock_id: item for item in transfer.item_stocks}

        kept = []
        for position, stock_id in enumerate(stock_ids):
            item = by_stock[stock_id]
            item.position = position
            kept.append(item)

        transfer.item_stocks = kept
        self.db.flush()
        return transfer
