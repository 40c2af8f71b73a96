import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from wms.api.deps import http_error, log_action, require_permission
from wms.db.session import get_db
from wms.models.inventory import InventoryTransaction
from wms.models.user import User
from wms.schemas.inventory import TransactionInRequest, TransactionOutRequest
from wms.services.inventory import InventoryError, record_inbound, record_outbound


router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("")
def list_transactions(
    limit: int = Query(default=50, ge=1, le=500),
    db: Session = Depends(get_db),
    _: User = Depends(require_permission("transactions:view")),
) -> list[dict]:
    rows = db.scalars(
        select(InventoryTransaction)
        .options(selectinload(InventoryTransaction.items))
        .order_by(InventoryTransaction.id.desc())
        .limit(limit)
    ).all()
    return [
        {
            "id": row.id,
            "type": row.type,
            "notes": row.notes,
            "operator_id": row.operator_id,
            "created_at": row.created_at.isoformat(),
            "items": [
                {
                    "product_id": item.product_id,
                    "location_id": item.location_id,
                    "quantity": item.quantity,
                    "stock_status_id": item.stock_status_id,
                    "batch_number": item.batch_number,
                    "purchase_price": item.purchase_price_at_trans,
                    "selling_price": item.selling_price_at_trans,
                }
                for item in row.items
            ],
        }
        for row in rows
    ]


@router.post("/in")
def create_transaction_in(
    payload: TransactionInRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("transactions:write")),
) -> dict:
    try:
        transaction = record_inbound(db, current_user.id, payload)
    except InventoryError as exc:
        db.rollback()
        logger.warning("Inbound transaction rejected: %s", exc.message)
        raise http_error(exc) from exc

    log_action(db, current_user.id, "create", "transaction_in", transaction.id, transaction.notes)
    db.commit()
    return {"msg": "Inbound goods recorded", "transactionId": transaction.id}


@router.post("/out")
def create_transaction_out(
    payload: TransactionOutRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("transactions:write")),
) -> dict:
    try:
        transaction = record_outbound(db, current_user.id, payload)
    except InventoryError as exc:
        db.rollback()
        logger.warning("Outbound transaction rejected: %s", exc.message)
        raise http_error(exc) from exc

    log_action(db, current_user.id, "create", "transaction_out", transaction.id, transaction.notes)
    db.commit()
    return {"msg": "Outbound goods recorded", "transactionId": transaction.id}
