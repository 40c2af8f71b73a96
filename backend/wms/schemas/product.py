from pydantic import BaseModel, ConfigDict, Field


class ProductCreate(BaseModel):
    sku: str = Field(min_length=1, max_length=64)
    barcode: str | None = None
    name: str = Field(min_length=1)
    description: str = ""
    unit: str = "pcs"
    purchase_price: float = Field(default=0, ge=0)
    selling_price: float = Field(default=0, ge=0)
    volume_m3: float | None = Field(default=None, ge=0)
    min_stock: int = Field(default=0, ge=0)


class ProductRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    sku: str
    barcode: str | None = None
    name: str
    unit: str
    purchase_price: float
    selling_price: float
    volume_m3: float | None = None
    min_stock: int = 0
