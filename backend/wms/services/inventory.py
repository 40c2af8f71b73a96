"""Stock mutation engine.

All functions here only ``flush``; the calling route owns the commit so that a
multi-item transaction is applied atomically or not at all.
"""
from __future__ import annotations

import logging

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from wms.core.config import get_settings
from wms.models.inventory import InventoryTransaction, StockLevel, StockStatus, TransactionItem
from wms.models.location import Location
from wms.models.product import Product
from wms.schemas.inventory import OpnameRequest, TransactionInRequest, TransactionOutRequest


logger = logging.getLogger(__name__)


class InventoryError(Exception):
    status_code = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class EntityNotFound(InventoryError):
    status_code = 404


class CapacityExceeded(InventoryError):
    pass


class InsufficientStock(InventoryError):
    pass


def get_product(db: Session, product_id: int) -> Product:
    product = db.scalar(select(Product).where(Product.id == product_id))
    if not product:
        raise EntityNotFound(f"Product {product_id} not found")
    return product


def get_location(db: Session, location_id: int) -> Location:
    location = db.scalar(select(Location).where(Location.id == location_id))
    if not location:
        raise EntityNotFound(f"Location {location_id} not found")
    return location


def default_stock_status(db: Session) -> StockStatus:
    name = get_settings().default_stock_status_name
    status = db.scalar(select(StockStatus).where(StockStatus.name == name))
    if not status:
        raise EntityNotFound(f"Stock status '{name}' is not configured")
    return status


def ensure_stock_status(db: Session, status_id: int) -> None:
    if not db.scalar(select(StockStatus.id).where(StockStatus.id == status_id)):
        raise EntityNotFound(f"Stock status {status_id} not found")


def system_count(db: Session, product_id: int, location_id: int) -> int:
    total = db.scalar(
        select(func.coalesce(func.sum(StockLevel.quantity), 0))
        .where(StockLevel.product_id == product_id)
        .where(StockLevel.location_id == location_id)
    )
    return int(total or 0)


def location_volume_used(db: Session, location_id: int) -> float:
    default_volume = get_settings().default_item_volume_m3
    total = db.scalar(
        select(func.coalesce(func.sum(StockLevel.quantity * func.coalesce(Product.volume_m3, default_volume)), 0))
        .join(Product, Product.id == StockLevel.product_id)
        .where(StockLevel.location_id == location_id)
    )
    return float(total or 0)


def item_volume(product: Product) -> float:
    if product.volume_m3:
        return product.volume_m3
    return get_settings().default_item_volume_m3


def _find_batch_row(db: Session, product_id: int, location_id: int, batch_number: str | None) -> StockLevel | None:
    query = (
        select(StockLevel)
        .where(StockLevel.product_id == product_id)
        .where(StockLevel.location_id == location_id)
    )
    if batch_number is None:
        query = query.where(StockLevel.batch_number.is_(None))
    else:
        query = query.where(StockLevel.batch_number == batch_number)
    return db.scalar(query.with_for_update())


def record_inbound(db: Session, operator_id: int, payload: TransactionInRequest) -> InventoryTransaction:
    # capacity is checked for every item before anything is written
    volume_by_location: dict[int, tuple[float, float]] = {}
    products: dict[int, Product] = {}
    for index, item in enumerate(payload.items, start=1):
        product = products.get(item.product_id) or get_product(db, item.product_id)
        products[product.id] = product
        ensure_stock_status(db, item.stock_status_id)

        if item.location_id not in volume_by_location:
            location = get_location(db, item.location_id)
            volume_by_location[item.location_id] = (
                location.max_capacity_m3,
                location_volume_used(db, item.location_id),
            )
        max_capacity, used = volume_by_location[item.location_id]
        new_total = used + item_volume(product) * item.quantity
        if max_capacity > 0 and new_total > max_capacity:
            raise CapacityExceeded(
                f"Item #{index}: capacity of location {item.location_id} exceeded. "
                f"New used volume: {new_total:.2f} m3 (max: {max_capacity:.2f} m3)"
            )
        volume_by_location[item.location_id] = (max_capacity, new_total)

    transaction = InventoryTransaction(
        type="IN",
        notes=payload.notes or "",
        supplier_id=payload.supplier_id,
        operator_id=operator_id,
    )
    db.add(transaction)

    for item in payload.items:
        product = products[item.product_id]
        batch_number = item.batch_number or None
        row = _find_batch_row(db, item.product_id, item.location_id, batch_number)
        old_qty = row.quantity if row else 0
        old_cost = row.average_cost if row else 0.0
        if old_qty + item.quantity > 0:
            new_cost = (old_qty * old_cost + item.quantity * item.purchase_price) / (old_qty + item.quantity)
        else:
            new_cost = item.purchase_price

        if row:
            row.quantity += item.quantity
            row.average_cost = new_cost
            if item.expiry_date:
                row.expiry_date = item.expiry_date
        else:
            db.add(
                StockLevel(
                    product_id=item.product_id,
                    location_id=item.location_id,
                    batch_number=batch_number,
                    expiry_date=item.expiry_date,
                    quantity=item.quantity,
                    average_cost=new_cost,
                )
            )
            db.flush()

        transaction.items.append(
            TransactionItem(
                product_id=item.product_id,
                location_id=item.location_id,
                quantity=item.quantity,
                stock_status_id=item.stock_status_id,
                batch_number=batch_number,
                expiry_date=item.expiry_date,
                purchase_price_at_trans=item.purchase_price,
                selling_price_at_trans=item.selling_price or 0,
            )
        )
        if item.selling_price and item.selling_price > 0:
            product.selling_price = item.selling_price

    db.flush()
    logger.info("Inbound transaction %s recorded with %d item(s)", transaction.id, len(payload.items))
    return transaction


def record_outbound(db: Session, operator_id: int, payload: TransactionOutRequest) -> InventoryTransaction:
    transaction = InventoryTransaction(
        type="OUT",
        notes=payload.notes or "",
        customer_id=payload.customer_id,
        operator_id=operator_id,
    )
    db.add(transaction)

    for index, item in enumerate(payload.items, start=1):
        product = get_product(db, item.product_id)
        get_location(db, item.location_id)
        ensure_stock_status(db, item.stock_status_id)

        batches = db.scalars(
            select(StockLevel)
            .where(StockLevel.product_id == item.product_id)
            .where(StockLevel.location_id == item.location_id)
            .where(StockLevel.quantity > 0)
            .order_by(StockLevel.expiry_date.asc().nulls_last(), StockLevel.created_at.asc(), StockLevel.id.asc())
            .with_for_update()
        ).all()
        available = sum(batch.quantity for batch in batches)
        if available < item.quantity:
            raise InsufficientStock(
                f"Item #{index}: insufficient stock at this location "
                f"(available: {available}, requested: {item.quantity})"
            )

        remaining = item.quantity
        for batch in batches:
            if remaining <= 0:
                break
            deduct = min(batch.quantity, remaining)
            batch.quantity -= deduct
            transaction.items.append(
                TransactionItem(
                    product_id=item.product_id,
                    location_id=item.location_id,
                    quantity=deduct,
                    stock_status_id=item.stock_status_id,
                    batch_number=batch.batch_number,
                    expiry_date=batch.expiry_date,
                    purchase_price_at_trans=batch.average_cost,
                    selling_price_at_trans=item.selling_price,
                )
            )
            remaining -= deduct

        if item.selling_price > 0:
            product.selling_price = item.selling_price

    db.flush()
    logger.info("Outbound transaction %s recorded with %d item(s)", transaction.id, len(payload.items))
    return transaction


def record_opname(db: Session, operator_id: int, payload: OpnameRequest) -> int:
    """Apply ``physical - system`` to the batchless row and log it. Returns the adjustment."""
    get_product(db, payload.product_id)
    get_location(db, payload.location_id)
    adjustment = payload.physical_count - payload.system_count
    if adjustment == 0:
        return 0

    row = _find_batch_row(db, payload.product_id, payload.location_id, None)
    current = row.quantity if row else 0
    if current + adjustment < 0:
        raise InsufficientStock(
            f"Adjustment {adjustment} would make batchless stock negative (current: {current})"
        )
    if row:
        row.quantity += adjustment
    else:
        db.add(
            StockLevel(
                product_id=payload.product_id,
                location_id=payload.location_id,
                batch_number=None,
                quantity=adjustment,
            )
        )

    transaction = InventoryTransaction(
        type="IN" if adjustment > 0 else "OUT",
        notes=(
            f"Opname adjustment: physical({payload.physical_count}) vs system({payload.system_count}). "
            f"Notes: {payload.notes or '-'}"
        ),
        operator_id=operator_id,
    )
    transaction.items.append(
        TransactionItem(
            product_id=payload.product_id,
            location_id=payload.location_id,
            quantity=abs(adjustment),
            stock_status_id=default_stock_status(db).id,
        )
    )
    db.add(transaction)
    db.flush()
    logger.info(
        "Opname adjustment %+d for product %s at location %s",
        adjustment,
        payload.product_id,
        payload.location_id,
    )
    return adjustment
