import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from wms.api.deps import log_action, require_permission
from wms.db.session import get_db
from wms.models.inventory import StockLevel
from wms.models.product import Product
from wms.models.user import User
from wms.schemas.product import ProductCreate, ProductRead


router = APIRouter()
logger = logging.getLogger(__name__)


def serialize_product(product: Product) -> dict:
    return ProductRead.model_validate(product).model_dump()


@router.get("")
def list_products(
    search: str = "",
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=1000),
    db: Session = Depends(get_db),
    _: User = Depends(require_permission("products:view")),
) -> dict:
    query = select(Product).where(Product.is_active.is_(True))
    if search:
        pattern = f"%{search}%"
        query = query.where(or_(Product.sku.ilike(pattern), Product.name.ilike(pattern)))

    total_count = db.scalar(select(func.count()).select_from(query.subquery())) or 0
    rows = db.scalars(query.order_by(Product.created_at.desc(), Product.id.desc()).limit(limit).offset((page - 1) * limit)).all()

    totals = dict(
        db.execute(
            select(StockLevel.product_id, func.coalesce(func.sum(StockLevel.quantity), 0))
            .where(StockLevel.product_id.in_([row.id for row in rows]))
            .group_by(StockLevel.product_id)
        ).all()
    )
    products = []
    for row in rows:
        data = serialize_product(row)
        data["total_quantity_in_stock"] = int(totals.get(row.id, 0))
        products.append(data)

    return {
        "products": products,
        "totalPages": -(-total_count // limit),
        "currentPage": page,
        "totalCount": total_count,
    }


@router.get("/by-code/{code}")
def get_product_by_code(
    code: str,
    db: Session = Depends(get_db),
    _: User = Depends(require_permission("products:view")),
) -> dict:
    normalized = code.strip().lower()
    product = db.scalar(
        select(Product)
        .where(Product.is_active.is_(True))
        .where(or_(func.lower(Product.sku) == normalized, func.lower(Product.barcode) == normalized))
        .limit(1)
    )
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return serialize_product(product)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_product(
    payload: ProductCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("products:write")),
) -> dict:
    clauses = [Product.sku == payload.sku]
    if payload.barcode:
        clauses.append(Product.barcode == payload.barcode)
    if db.scalar(select(Product.id).where(or_(*clauses))):
        raise HTTPException(status_code=409, detail="SKU or barcode already registered")

    product = Product(**payload.model_dump())
    db.add(product)
    db.flush()
    log_action(db, current_user.id, "create", "product", product.id, f"SKU {product.sku}")
    db.commit()
    db.refresh(product)
    logger.info("Product %s created by %s", product.sku, current_user.email)
    return serialize_product(product)
