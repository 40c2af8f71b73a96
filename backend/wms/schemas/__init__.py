from wms.schemas.auth import LoginRequest, TokenResponse
from wms.schemas.inventory import (
    OpnameRequest,
    SystemCountResponse,
    TransactionInRequest,
    TransactionItemIn,
    TransactionItemOut,
    TransactionOutRequest,
)
from wms.schemas.location import LocationCreate, LocationRead
from wms.schemas.product import ProductCreate, ProductRead
from wms.schemas.user import UserRead

__all__ = [
    "LocationCreate",
    "LocationRead",
    "LoginRequest",
    "OpnameRequest",
    "ProductCreate",
    "ProductRead",
    "SystemCountResponse",
    "TokenResponse",
    "TransactionInRequest",
    "TransactionItemIn",
    "TransactionItemOut",
    "TransactionOutRequest",
    "UserRead",
]
