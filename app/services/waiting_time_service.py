"""
Waiting-time estimator.
Maps the newest queue-length report plus the station's active pump count
to a minute range. Only the single most recent queue_category is used; the
lookback fetch exists so the window can be widened without a query change.
"""

import math
from dataclasses import dataclass
from typing import Optional
from sqlalchemy.orm import Session
from app.models.contribution import Contribution
from app.models.station_status import StationStatus
from app.models.enums import QueueCategory
from app.config import settings
from app.utils.logger import get_logger

logger = get_logger(__name__)

# Estimated vehicles in line per queue bucket: (min, max)
QUEUE_VEHICLE_RANGES = {
    QueueCategory.Q_0_10: (0, 3),
    QueueCategory.Q_10_30: (3, 10),
    QueueCategory.Q_30_60: (10, 20),
    QueueCategory.Q_60_PLUS: (20, 50),
}


@dataclass(frozen=True)
class WaitingTime:
    min: Optional[int] = None
    max: Optional[int] = None

    @property
    def is_known(self) -> bool:
        return self.min is not None and self.max is not None


def estimate_waiting_time(queue_category: Optional[str], pumps_active: Optional[int]) -> WaitingTime:
    """Minutes = floor(vehicles / pumps × minutes-per-vehicle), per bound."""
    if not queue_category:
        return WaitingTime()
    try:
        vehicles_min, vehicles_max = QUEUE_VEHICLE_RANGES[QueueCategory(queue_category)]
    except ValueError:
        logger.warning(f"Unknown queue category '{queue_category}' — no estimate")
        return WaitingTime()

    pumps = pumps_active or 1
    per_vehicle = settings.AVG_MINUTES_PER_VEHICLE
    return WaitingTime(
        min=math.floor(vehicles_min / pumps * per_vehicle),
        max=math.floor(vehicles_max / pumps * per_vehicle),
    )


def compute_waiting_time(db: Session, station_id: int) -> WaitingTime:
    """Waiting-time estimate for a station. (None, None) when no queue report exists."""
    recent = (
        db.query(Contribution.queue_category)
        .filter(Contribution.station_id == station_id, Contribution.queue_category.isnot(None))
        .order_by(Contribution.created_at.desc(), Contribution.id.desc())
        .limit(settings.WAIT_LOOKBACK_CONTRIBUTIONS)
        .all()
    )
    if not recent:
        return WaitingTime()

    latest_status = (
        db.query(StationStatus.pumps_active)
        .filter(StationStatus.station_id == station_id)
        .order_by(StationStatus.updated_at.desc())
        .first()
    )
    pumps_active = latest_status.pumps_active if latest_status else None

    return estimate_waiting_time(recent[0].queue_category, pumps_active)
