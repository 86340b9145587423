from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional
from app.models.enums import Availability, FuelType, QueueCategory, SourceType


class ContributionCreate(BaseModel):
    station_id: int
    source_type: SourceType = SourceType.PUBLIC
    queue_category: Optional[QueueCategory] = None
    fuel_status: Optional[Availability] = None
    user_id: Optional[str] = None
    photo_url: Optional[str] = None
    # Fuel types the fuel_status applies to. Public reports cover both.
    fuel_types: list[FuelType] = Field(default_factory=lambda: [FuelType.ESSENCE, FuelType.GASOIL], min_length=1)


class ContributionOut(BaseModel):
    id: int
    station_id: int
    user_id: Optional[str]
    source_type: str
    queue_category: Optional[str]
    fuel_status: Optional[str]
    photo_url: Optional[str]
    created_at: datetime

    class Config:
        from_attributes = True


class IngestResult(BaseModel):
    status: str = "accepted"
    contribution_id: int
    statuses_updated: list[FuelType] = []
    warnings: list[str] = []
