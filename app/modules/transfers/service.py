# app/modules/transfers/service.py

from typing import Dict, Any, Optional, List, Tuple
from datetime import datetime
from sqlalchemy.orm import Session
import logging

from app.config.database import transaction
from app.config.settings import settings
from app.core.exceptions import BadRequestError, NotFoundError
from app.modules.configuration import ConfigurationRepository, TransferReportConfig
from app.modules.counters import CounterRepository, format_transfer_no
from app.modules.schools import SchoolsService, SchoolsRepository
from app.modules.users import UsersRepository
from app.shared.database.models import (
    Asset, Stock, Transfer, GOOD_CONDITION, ISSUED, REISSUED
)
from app.shared.schemas.common import paginate
from app.shared.services.inventory_service import InventoryService

from .issuance import build_batch_items, QTY_PER_ITEM
from .repository import TransfersRepository
from .schemas import (
    TransferCreate, TransferCreateResponse, TransferUpdate, TransferApprove,
    TransferComplete, TransferActionResponse, TransferDetail, TransferItemDetail,
    TransferSummary, TransferListResponse, TransferStatus
)

logger = logging.getLogger(__name__)


class TransfersService:
    def __init__(self, db: Session, report_config: Optional[TransferReportConfig] = None):
        self.db = db
        self.repository = TransfersRepository(db)
        self.counters = CounterRepository(db)
        self.schools = SchoolsService(db)
        self.schools_repository = SchoolsRepository(db)
        self.users = UsersRepository(db)
        self.report_config = report_config

    # ==================== CREAR ====================

    async def create_transfer(self, transfer_data: TransferCreate) -> TransferCreateResponse:
        """
        Crear reporte de transferencia en una sola transacción:
        división/escuela -> destino -> número de transferencia -> validación
        de unidades -> inserción. Cualquier fallo deshace todo (contador incluido).
        """
        transfer_type = transfer_data.type.value
        stock_ids = [item.stock_id for item in transfer_data.item_stocks]

        logger.info(f"📦 Creando {transfer_type}")
        logger.info(f"   Origen: {transfer_data.from_office}")
        logger.info(f"   División ID: {transfer_data.division_id}, Escuela: {transfer_data.school or '-'}")
        logger.info(f"   Unidades: {stock_ids}")

        try:
            with transaction(self.db):
                config = self._get_report_config()
                fund_cluster = config.fund_cluster_for(transfer_type)

                # 1. División y escuela destino
                division = self.schools_repository.get_division_by_id(transfer_data.division_id)
                if not division:
                    raise NotFoundError("Division not found.")

                school = None
                if transfer_data.school:
                    school = await self.schools.find_or_create_school(
                        transfer_data.school, transfer_data.division_id
                    )

                # 2. Etiqueta de destino
                to = f"{school['name']} - {division.name}" if school else division.name

                # 3. Número de transferencia (incremento atómico)
                count = self.counters.increment_counter_by_type(transfer_type)
                transfer_no = format_transfer_no(count)

                # 4. Validar unidades y balance disponible
                for stock, asset in self._resolve_item_stocks(stock_ids, for_update=False):
                    current_balance = asset.quantity or 0
                    if stock.condition == GOOD_CONDITION and current_balance < QTY_PER_ITEM:
                        raise BadRequestError(
                            f"Insufficient stock for {asset.name}. "
                            f"Available: {current_balance}, Requested: {QTY_PER_ITEM}"
                        )

                # 5. Persistir
                transfer = self.repository.create_transfer(
                    {
                        'type': transfer_type,
                        'entity_name': config.entity_name,
                        'fund_cluster': fund_cluster,
                        'from_office': transfer_data.from_office,
                        'to': to,
                        'division_id': division.id,
                        'school_id': school['id'] if school else None,
                        'transfer_no': transfer_no,
                        'transfer_reason': transfer_data.transfer_reason,
                        'transfer_type': transfer_data.transfer_type,
                    },
                    stock_ids
                )
                transfer_id = transfer.id

        except Exception as e:
            logger.error(f"❌ Error creating {transfer_type}: {e}")
            raise

        logger.info(f"✅ Transferencia creada: #{transfer_id} ({transfer_no}) → {to}")

        return TransferCreateResponse(
            success=True,
            message="Successfully created transfer.",
            transfer_id=transfer_id,
            transfer_no=transfer_no,
            status=TransferStatus.PENDING.value
        )

    # ==================== CONSULTAS ====================

    async def get_transfers(
        self,
        transfer_type: str,
        page: int = 1,
        limit: int = settings.default_page_limit,
        search: str = "",
        sort_by: str = "id",
        sort_order: str = "desc"
    ) -> TransferListResponse:
        transfers, total = self.repository.get_transfers(
            transfer_type, page=page, limit=limit, search=search,
            sort_by=sort_by, sort_order=sort_order
        )

        summaries = [
            TransferSummary(
                id=t.id,
                type=t.type,
                transfer_no=t.transfer_no,
                from_office=t.from_office,
                to=t.to,
                transfer_type=t.transfer_type or "",
                status=t.status,
                created_at=t.created_at,
                completed_at=t.completed_at
            )
            for t in transfers
        ]

        return paginate(summaries, page, limit, total, response_cls=TransferListResponse)

    async def get_transfer_by_id(self, transfer_id: int) -> TransferDetail:
        transfer = self.repository.get_transfer_by_id(transfer_id)
        if not transfer:
            raise NotFoundError("Transfer not found.")

        return self._build_transfer_detail(transfer)

    # ==================== ACTUALIZAR / APROBAR / COMPLETAR ====================

    async def update_transfer(self, transfer_id: int, update_data: TransferUpdate) -> TransferDetail:
        """Parche genérico: no dispara emisión de stock"""
        values = update_data.model_dump(exclude_unset=True)

        try:
            with transaction(self.db):
                transfer = self._get_transfer_for_update(transfer_id)
                self._ensure_not_completed(transfer)
                self._apply_update(transfer, values)
        except Exception as e:
            logger.error(f"❌ Error updating transfer #{transfer_id}: {e}")
            raise

        return await self.get_transfer_by_id(transfer_id)

    async def approve_transfer(self, transfer_id: int, approve_data: TransferApprove) -> TransferActionResponse:
        """
        Aprobar: status=approved, approved_by, approved_at=ahora.
        Re-aprobar un reporte ya aprobado vuelve a sellar approved_at.
        """
        try:
            with transaction(self.db):
                transfer = self._get_transfer_for_update(transfer_id)
                self._ensure_not_completed(transfer)
                self._apply_update(transfer, {
                    'approved_by': approve_data.approved_by,
                    'status': TransferStatus.APPROVED.value
                })
        except Exception as e:
            logger.error(f"❌ Error approving transfer #{transfer_id}: {e}")
            raise

        logger.info(f"✅ Transferencia #{transfer_id} aprobada por usuario {approve_data.approved_by}")

        return TransferActionResponse(
            success=True,
            message="Transfer is set to approved successfully",
            transfer=await self.get_transfer_by_id(transfer_id)
        )

    async def complete_transfer(self, transfer_id: int, complete_data: TransferComplete) -> TransferActionResponse:
        """
        Completar + emisión por lote en una sola transacción:
        1. Bloquear reporte y calcular el lote (balance corrido por activo)
        2. Sellar issued_by / received_by / completed_at, status=completed
        3. Registrar kardex en destino y descontar balances
        """
        try:
            with transaction(self.db):
                transfer = self._get_transfer_for_update(transfer_id)
                self._ensure_not_completed(transfer)

                entries = self._resolve_item_stocks(transfer.stock_ids, for_update=True)
                batch_items = build_batch_items(entries)

                logger.info(f"🚚 Completando transferencia #{transfer_id} ({transfer.transfer_no}) → {transfer.to}")
                logger.info(f"   Items en lote: {len(batch_items)}")

                self._apply_update(transfer, {
                    'issued_by': complete_data.issued_by,
                    'received_by_name': complete_data.received_by_name,
                    'received_by_designation': complete_data.received_by_designation,
                    'status': TransferStatus.COMPLETED.value
                })

                InventoryService.issue_stock_by_batch(self.db, transfer.to, batch_items)
        except Exception as e:
            logger.error(f"❌ Error transferring stock by ID #{transfer_id}: {e}")
            raise

        logger.info(f"🎉 Transferencia #{transfer_id} completada")

        return TransferActionResponse(
            success=True,
            message="Transfer is set to completed successfully",
            transfer=await self.get_transfer_by_id(transfer_id)
        )

    # ==================== HELPERS ====================

    def _get_report_config(self) -> TransferReportConfig:
        if self.report_config is None:
            self.report_config = ConfigurationRepository(self.db).get_transfer_report_config()
        return self.report_config

    def _get_transfer_for_update(self, transfer_id: int) -> Transfer:
        transfer = self.repository.get_transfer_by_id(transfer_id, for_update=True)
        if not transfer:
            raise NotFoundError("Transfer not found.")
        return transfer

    def _ensure_not_completed(self, transfer: Transfer) -> None:
        # El estado nunca retrocede: un reporte completado ya no se modifica
        if transfer.status == TransferStatus.COMPLETED.value:
            raise BadRequestError(f"Transfer {transfer.transfer_no} is already completed.")

    def _resolve_item_stocks(self, stock_ids: List[int], for_update: bool) -> List[Tuple[Stock, Asset]]:
        """
        Resolver cada unidad y su activo, en orden; falla si alguno no existe.
        Con for_update los activos se bloquean juntos en orden ascendente de ID.
        """
        stocks = []
        for stock_id in stock_ids:
            stock = InventoryService.get_stock_by_id(self.db, stock_id)
            if not stock:
                raise NotFoundError(f"Stock ID {stock_id} not found.")
            stocks.append(stock)

        locked = InventoryService.lock_assets(self.db, [s.asset_id for s in stocks]) if for_update else None

        entries = []
        for stock in stocks:
            if locked is not None:
                asset = locked.get(stock.asset_id)
            else:
                asset = InventoryService.get_asset_by_id(self.db, stock.asset_id)
            if not asset:
                raise NotFoundError(f"Asset not found for stock ID: {stock.id}")

            entries.append((stock, asset))
        return entries

    def _apply_update(self, transfer: Transfer, values: Dict[str, Any]) -> Transfer:
        """
        Ruta común de actualización (parche, aprobación y completación):
        - item_stocks: solo IDs que ya pertenecen al reporte
        - approved_by: valida usuario y sella approved_at
        - issued_by + received_by_*: valida usuario y sella completed_at
        """
        values = dict(values)
        now = datetime.now()

        item_stocks = values.pop('item_stocks', None)
        if item_stocks is not None:
            stock_ids = [item['stock_id'] if isinstance(item, dict) else item.stock_id for item in item_stocks]
            self._resolve_item_stocks(stock_ids, for_update=False)

            current_ids = set(transfer.stock_ids)
            if not all(stock_id in current_ids for stock_id in stock_ids):
                raise NotFoundError("One or more stocks not found in the current transfer.")

            self.repository.reorder_item_stocks(transfer, stock_ids)

        if values.get('approved_by'):
            if not self.users.get_user_by_id(values['approved_by']):
                raise NotFoundError("Approved by user not found.")
            values['approved_at'] = now

        if values.get('issued_by') and values.get('received_by_name') and values.get('received_by_designation'):
            if not self.users.get_user_by_id(values['issued_by']):
                raise NotFoundError("Issued by user not found.")
            values['completed_at'] = now

        return self.repository.update_transfer(transfer, values)

    def _build_transfer_detail(self, transfer: Transfer) -> TransferDetail:
        items = []
        for link in transfer.item_stocks:
            stock = link.stock
            asset = stock.asset if stock else None

            items.append(TransferItemDetail(
                stock_id=link.stock_id,
                item_no=(stock.item_no or "") if stock else "",
                condition=(stock.condition or "") if stock else "",
                reference=stock.reference if stock and stock.condition in (ISSUED, REISSUED) else None,
                serial_no=(stock.serial_no or "") if stock else "",
                stock_number=(asset.stock_number or "") if asset else "",
                description=(asset.description or "") if asset else "",
                unit_of_measurement=(asset.unit_of_measurement or "") if asset else "",
                cost=float(asset.cost or 0) if asset else 0,
                created_at=asset.created_at if asset else None
            ))

        approver = transfer.approver
        issuer = transfer.issuer

        return TransferDetail(
            id=transfer.id,
            type=transfer.type,
            entity_name=transfer.entity_name,
            fund_cluster=transfer.fund_cluster,
            from_office=transfer.from_office,
            to=transfer.to,
            division_id=transfer.division_id,
            school_id=transfer.school_id,
            transfer_no=transfer.transfer_no,
            transfer_reason=transfer.transfer_reason or "",
            transfer_type=transfer.transfer_type or "",
            status=transfer.status,
            item_stocks=items,
            approved_by=transfer.approved_by,
            approved_by_name=approver.full_name if approver else None,
            approved_by_designation=approver.designation if approver else None,
            approved_at=transfer.approved_at,
            issued_by=transfer.issued_by,
            issued_by_name=issuer.full_name if issuer else None,
            issued_by_designation=issuer.designation if issuer else None,
            received_by_name=transfer.received_by_name or "",
            received_by_designation=transfer.received_by_designation or "",
            completed_at=transfer.completed_at,
            created_at=transfer.created_at,
            updated_at=transfer.updated_at
        )
