from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional
from app.schemas.station_status import StationStatusOut


class StationCreate(BaseModel):
    name: str
    brand: Optional[str] = None
    municipality: str
    neighborhood: str
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    is_active: bool = True


class StationActiveUpdate(BaseModel):
    is_active: bool


class StationOut(BaseModel):
    id: int
    name: str
    brand: Optional[str]
    municipality: str
    neighborhood: str
    latitude: float
    longitude: float
    is_active: bool
    created_at: datetime
    updated_at: datetime
    statuses: list[StationStatusOut] = []

    class Config:
        from_attributes = True
