# app/modules/transfers/issuance.py
"""
Cálculo del lote de emisión al completar una transferencia.

Se recorre la lista de unidades EN SU ORDEN GUARDADO (el orden define los
números de item). Por cada activo se lleva un balance corrido que arranca en
el balance actual guardado la primera vez que aparece el activo en el lote:

- buena condición: item_no = (initial_qty - balance_corrido) + 1,
  balance = balance_corrido - 1, y el balance corrido baja
- re-emitida / otra condición: conserva su item_no original, balance sin
  cambio, el balance corrido no baja (ya se descontó al emitirse por primera vez)
"""
from typing import Dict, Iterable, List, Tuple

from app.shared.database.models import Asset, Stock, GOOD_CONDITION, TRANSFERRED
from app.shared.schemas.stock_issuance import BatchItem

QTY_PER_ITEM = 1


def build_batch_items(entries: Iterable[Tuple[Stock, Asset]]) -> List[BatchItem]:
    running_balance: Dict[int, int] = {}
    items: List[BatchItem] = []

    for stock, asset in entries:
        current_balance = running_balance.get(asset.id, asset.quantity or 0)
        initial_qty = asset.initial_qty or asset.quantity or 0
        total_outs = max(0, initial_qty - current_balance)

        if stock.condition == GOOD_CONDITION:
            item_no = str(total_outs + QTY_PER_ITEM)
            balance = current_balance - QTY_PER_ITEM
        else:
            item_no = stock.item_no or ""
            balance = current_balance

        running_balance[asset.id] = balance

        items.append(BatchItem(
            asset_id=asset.id,
            stock_id=stock.id,
            reference=stock.reference or "",
            serial_no=stock.serial_no or "",
            qty=QTY_PER_ITEM,
            balance=balance,
            item_no=item_no,
            initial_condition=stock.condition or "",
            condition=TRANSFERRED
        ))

    return items
