# app/shared/services/inventory_service.py
from typing import Dict, Iterable, List, Optional
import logging

from sqlalchemy import and_
from sqlalchemy.orm import Session

from app.core.exceptions import BadRequestError, NotFoundError
from app.shared.database.models import Asset, Stock
from app.shared.schemas.stock_issuance import BatchItem

logger = logging.getLogger(__name__)


class InventoryService:
    """Balances de activos y kardex de unidades de stock"""

    @staticmethod
    def get_stock_by_id(db: Session, stock_id: int) -> Optional[Stock]:
        return db.query(Stock).filter(Stock.id == stock_id).first()

    @staticmethod
    def get_asset_by_id(db: Session, asset_id: int, for_update: bool = False) -> Optional[Asset]:
        """
        Obtener activo no eliminado.

        for_update=True toma SELECT FOR UPDATE sobre la fila: el balance queda
        bloqueado hasta que termine la transacción del llamador.
        """
        query = db.query(Asset).filter(
            and_(
                Asset.id == asset_id,
                Asset.deleted_at.is_(None)
            )
        )
        if for_update:
            query = query.with_for_update().populate_existing()
        return query.first()

    @staticmethod
    def lock_assets(db: Session, asset_ids: Iterable[int]) -> Dict[int, Asset]:
        """
        Bloquear varios activos no eliminados con un solo SELECT FOR UPDATE.
        Las filas se bloquean en orden ascendente de ID; los IDs sin activo no
        aparecen en el resultado.
        """
        ids = sorted(set(asset_ids))
        if not ids:
            return {}

        assets = db.query(Asset).filter(
            and_(
                Asset.id.in_(ids),
                Asset.deleted_at.is_(None)
            )
        ).order_by(Asset.id).with_for_update().populate_existing().all()

        return {asset.id: asset for asset in assets}

    @staticmethod
    def decrement_asset_quantity(db: Session, asset_id: int, amount: int) -> Asset:
        """Descontar balance de un activo bloqueado; nunca deja quantity < 0"""
        asset = InventoryService.get_asset_by_id(db, asset_id, for_update=True)
        if not asset:
            raise NotFoundError(f"Asset not found for ID: {asset_id}")

        available = asset.quantity or 0
        if available < amount:
            raise BadRequestError(
                f"Insufficient stock for {asset.name}. Available: {available}, Requested: {amount}"
            )

        quantity_before = available
        asset.quantity = available - amount
        db.flush()

        logger.info(f"   📉 Activo {asset.name} (ID {asset.id}): {quantity_before} → {asset.quantity}")
        return asset

    @staticmethod
    def issue_stock_by_batch(db: Session, office_name: str, items: List[BatchItem]) -> List[Stock]:
        """
        Registrar un lote de salidas dentro de la transacción del llamador.

        - Una fila de kardex por item, en el orden recibido
        - Descuento de balance por activo = cantidad de items en buena condición
        - Los items re-emitidos no vuelven a descontar
        """
        assets = InventoryService.lock_assets(db, [item.asset_id for item in items])
        deductions: Dict[int, int] = {}
        entries: List[Stock] = []

        for item in items:
            asset = assets.get(item.asset_id)
            if not asset:
                raise NotFoundError(f"Asset not found for ID: {item.asset_id}")

            entry = Stock(
                asset_id=asset.id,
                asset_name=asset.name,
                reference=item.reference,
                serial_no=item.serial_no,
                office_name=office_name,
                ins=0,
                outs=item.qty,
                balance=item.balance,
                item_no=item.item_no,
                initial_condition=item.initial_condition,
                condition=item.condition
            )
            db.add(entry)
            entries.append(entry)

            if item.deducts_balance:
                deductions[asset.id] = deductions.get(asset.id, 0) + item.qty

            logger.info(
                f"   📝 Kardex - activo {asset.id}, item {item.item_no}, "
                f"outs {item.qty}, balance {item.balance}"
            )

        for asset_id in sorted(deductions):
            amount = deductions[asset_id]
            InventoryService.decrement_asset_quantity(db, asset_id, amount)

        db.flush()
        return entries
