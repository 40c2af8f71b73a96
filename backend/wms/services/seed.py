import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from wms.core.security import hash_password
from wms.models.inventory import StockStatus
from wms.models.location import Location
from wms.models.product import Product
from wms.models.role import Role
from wms.models.user import User
from wms.services.rbac import ROLE_PERMISSIONS, serialize_permissions


logger = logging.getLogger(__name__)

STOCK_STATUSES = ["Good", "Damaged", "Quarantine"]


def seed_initial_data(db: Session) -> None:
    if db.query(Role).count() == 0:
        for role_name in ROLE_PERMISSIONS:
            db.add(Role(name=role_name, permissions=serialize_permissions(role_name)))
        db.commit()
        logger.info("Seeded roles: %s", ", ".join(ROLE_PERMISSIONS))

    if db.query(StockStatus).count() == 0:
        db.add_all([StockStatus(name=name) for name in STOCK_STATUSES])
        db.commit()

    if db.query(User).count() == 0:
        roles = {role.name: role for role in db.scalars(select(Role)).all()}
        db.add_all(
            [
                User(
                    email="admin@wms.local",
                    full_name="WMS Administrator",
                    hashed_password=hash_password("Admin123!"),
                    role_id=roles["admin"].id,
                ),
                User(
                    email="staff@wms.local",
                    full_name="Warehouse Staff",
                    hashed_password=hash_password("Staff123!"),
                    role_id=roles["staff"].id,
                ),
            ]
        )
        db.commit()

    if db.query(Location).count() == 0:
        db.add_all(
            [
                Location(name="A1", description="Rack A, level 1", max_capacity_m3=50),
                Location(name="B1", description="Rack B, level 1", max_capacity_m3=80),
            ]
        )
        db.commit()

    if db.query(Product).count() == 0:
        db.add_all(
            [
                Product(
                    sku="SKU-0001",
                    barcode="8990000000011",
                    name="Corrugated Box 40x30",
                    unit="pcs",
                    purchase_price=4500,
                    selling_price=6000,
                    volume_m3=0.036,
                    min_stock=20,
                ),
                Product(
                    sku="SKU-0002",
                    barcode="8990000000028",
                    name="Stretch Film 50cm",
                    unit="roll",
                    purchase_price=38000,
                    selling_price=45000,
                    volume_m3=0.004,
                    min_stock=10,
                ),
            ]
        )
        db.commit()
