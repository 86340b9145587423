from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class AlertOut(BaseModel):
    id: int
    station_id: int
    type: str
    status: str
    description: Optional[str]
    created_at: datetime
    resolved_at: Optional[datetime]

    class Config:
        from_attributes = True


class SweepResult(BaseModel):
    stations_checked: int
    alerts_opened: int
    stations_failed: int
