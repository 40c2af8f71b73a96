from fastapi import APIRouter, Depends, Query
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from wms.api.deps import http_error, log_action, require_permission
from wms.core.config import get_settings
from wms.db.session import get_db
from wms.models.inventory import StockLevel, StockStatus
from wms.models.location import Location
from wms.models.product import Product
from wms.models.user import User
from wms.schemas.inventory import OpnameRequest, SystemCountResponse
from wms.services.inventory import InventoryError, record_opname, system_count


router = APIRouter()
settings = get_settings()


@router.get("")
def list_stocks(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=1000, ge=1),
    db: Session = Depends(get_db),
    _: User = Depends(require_permission("stocks:view")),
) -> dict:
    total_count = db.scalar(select(func.count(StockLevel.id))) or 0
    rows = db.execute(
        select(Product.name, Product.sku, Location.name, StockLevel)
        .join(Product, Product.id == StockLevel.product_id)
        .join(Location, Location.id == StockLevel.location_id)
        .order_by(Product.name.asc(), StockLevel.id.asc())
        .limit(limit)
        .offset((page - 1) * limit)
    ).all()
    return {
        "stocks": [
            {
                "product_name": product_name,
                "sku": sku,
                "location_name": location_name,
                "batch_number": level.batch_number,
                "expiry_date": level.expiry_date.isoformat() if level.expiry_date else None,
                "quantity": level.quantity,
                "purchase_price": level.average_cost,
                "stock_value": round(level.quantity * level.average_cost, 2),
            }
            for product_name, sku, location_name, level in rows
        ],
        "totalPages": -(-total_count // limit),
        "currentPage": page,
        "totalCount": total_count,
    }


@router.get("/low-stock")
def low_stock(
    threshold: int | None = None,
    db: Session = Depends(get_db),
    _: User = Depends(require_permission("stocks:view")),
) -> list[dict]:
    limit = threshold if threshold and threshold > 0 else settings.low_stock_threshold
    rows = db.execute(
        select(Product.id, Product.sku, Product.name, Location.name, StockLevel.quantity)
        .join(Product, Product.id == StockLevel.product_id)
        .join(Location, Location.id == StockLevel.location_id)
        .where(StockLevel.quantity > 0)
        .where(StockLevel.quantity <= limit)
        .order_by(StockLevel.quantity.asc())
    ).all()
    return [
        {
            "product_id": product_id,
            "sku": sku,
            "product_name": product_name,
            "location_name": location_name,
            "quantity": quantity,
        }
        for product_id, sku, product_name, location_name, quantity in rows
    ]


@router.get("/batches")
def batch_suggestions(
    product_id: int,
    location_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(require_permission("stocks:view")),
) -> list[dict]:
    rows = db.scalars(
        select(StockLevel)
        .where(StockLevel.product_id == product_id)
        .where(StockLevel.location_id == location_id)
        .where(StockLevel.quantity > 0)
        .order_by(StockLevel.expiry_date.asc().nulls_last(), StockLevel.created_at.asc())
    ).all()
    return [
        {
            "batch_number": row.batch_number,
            "expiry_date": row.expiry_date.isoformat() if row.expiry_date else None,
            "quantity": row.quantity,
        }
        for row in rows
    ]


@router.get("/statuses")
def list_stock_statuses(
    db: Session = Depends(get_db),
    _: User = Depends(require_permission("stocks:view")),
) -> list[dict]:
    rows = db.scalars(select(StockStatus).order_by(StockStatus.id.asc())).all()
    return [{"id": row.id, "name": row.name} for row in rows]


@router.get("/specific/{product_id}/{location_id}", response_model=SystemCountResponse)
def specific_stock(
    product_id: int,
    location_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(require_permission("stocks:view")),
) -> SystemCountResponse:
    return SystemCountResponse(system_count=system_count(db, product_id, location_id))


@router.post("/opname")
def create_opname(
    payload: OpnameRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("stocks:write")),
) -> dict:
    try:
        adjustment = record_opname(db, current_user.id, payload)
    except InventoryError as exc:
        db.rollback()
        raise http_error(exc) from exc

    if adjustment:
        log_action(
            db,
            current_user.id,
            "opname",
            "stock",
            payload.product_id,
            f"Location {payload.location_id}: {adjustment:+d}",
        )
    db.commit()
    return {"msg": f"Stock opname recorded. Adjustment: {adjustment}", "adjustment": adjustment}
