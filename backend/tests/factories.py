from sqlalchemy import select

from wms.models.inventory import StockLevel
from wms.models.location import Location
from wms.models.product import Product


ADMIN_EMAIL = "admin@wms.local"
ADMIN_PASSWORD = "Admin123!"


def get_product(db, sku):
    return db.scalar(select(Product).where(Product.sku == sku))


def get_location(db, name):
    return db.scalar(select(Location).where(Location.name == name))


def make_stock(db, product, location, quantity, batch_number=None, expiry_date=None, average_cost=0.0):
    row = StockLevel(
        product_id=product.id,
        location_id=location.id,
        batch_number=batch_number,
        expiry_date=expiry_date,
        quantity=quantity,
        average_cost=average_cost,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    return row
