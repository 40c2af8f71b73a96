from wms.models.audit import AuditLog
from wms.models.inventory import InventoryTransaction, StockLevel, StockStatus, TransactionItem
from wms.models.location import Location
from wms.models.product import Product
from wms.models.role import Role
from wms.models.user import User

__all__ = [
    "AuditLog",
    "InventoryTransaction",
    "Location",
    "Product",
    "Role",
    "StockLevel",
    "StockStatus",
    "TransactionItem",
    "User",
]
