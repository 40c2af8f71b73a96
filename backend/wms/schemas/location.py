from pydantic import BaseModel, Field


class LocationCreate(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    description: str = ""
    max_capacity_m3: float = Field(default=0, ge=0)


class LocationRead(BaseModel):
    id: int
    name: str
    description: str = ""
    max_capacity_m3: float
    current_volume_m3: float = 0
