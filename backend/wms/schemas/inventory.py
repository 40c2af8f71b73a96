from datetime import date

from pydantic import BaseModel, Field


class TransactionItemIn(BaseModel):
    product_id: int
    location_id: int
    quantity: int = Field(ge=1)
    stock_status_id: int
    purchase_price: float = Field(default=0, ge=0)
    selling_price: float | None = Field(default=None, ge=0)
    batch_number: str | None = None
    expiry_date: date | None = None


class TransactionInRequest(BaseModel):
    notes: str | None = ""
    supplier_id: int | None = None
    items: list[TransactionItemIn] = Field(min_length=1)


class TransactionItemOut(BaseModel):
    product_id: int
    location_id: int
    quantity: int = Field(ge=1)
    stock_status_id: int
    selling_price: float = Field(default=0, ge=0)


class TransactionOutRequest(BaseModel):
    notes: str | None = ""
    customer_id: int | None = None
    items: list[TransactionItemOut] = Field(min_length=1)


class OpnameRequest(BaseModel):
    product_id: int
    location_id: int
    physical_count: int = Field(ge=0)
    system_count: int = Field(ge=0)
    notes: str | None = ""


class SystemCountResponse(BaseModel):
    system_count: int
