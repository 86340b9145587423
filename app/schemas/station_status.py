from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional
from app.models.enums import Availability, FuelType, SourceType


class StationStatusOut(BaseModel):
    id: int
    station_id: int
    fuel_type: str
    availability: str
    pumps_active: Optional[int]
    waiting_time_min: Optional[int]
    waiting_time_max: Optional[int]
    reliability_score: int
    reliability_level: Optional[str] = None
    last_update_source: str
    updated_at: datetime

    class Config:
        from_attributes = True


class StatusEdit(BaseModel):
    """Direct status edit from a station manager or trusted reporter."""
    availability: Availability
    fuel_types: list[FuelType] = Field(default_factory=lambda: [FuelType.ESSENCE, FuelType.GASOIL], min_length=1)
    pumps_active: Optional[int] = Field(default=None, ge=0)
    source_type: SourceType = SourceType.OFFICIAL
    user_id: Optional[str] = None


class WaitingTimeOut(BaseModel):
    min: Optional[int]
    max: Optional[int]


class RecomputeResult(BaseModel):
    station_id: int
    waiting_time: WaitingTimeOut
    reliability_score: int
