"""
Operator alerts: periodic sweep + manual resolution.

generate_alerts() runs one sweep over every active station and opens
NO_UPDATE / HIGH_WAIT / CONTRADICTION alerts. An alert is only opened when no
OPEN alert of that type exists for the station. Alerts are never closed by the
sweep — they stay OPEN until an operator resolves them.

The dedup check is a plain read before the insert; two overlapping sweeps can
both open the same alert. Duplicates are cosmetic and left as is.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional
from sqlalchemy.orm import Session
from app.models.alert import Alert
from app.models.contribution import Contribution
from app.models.station import Station
from app.models.enums import AlertStatus, AlertType
from app.services.reliability_service import has_contradiction
from app.services.status_service import latest_status
from app.config import settings
from app.utils.clock import utcnow
from app.utils.logger import get_logger

logger = get_logger(__name__)


class AlertNotFound(Exception):
    pass


class AlertAlreadyResolved(Exception):
    pass


@dataclass
class SweepSummary:
    stations_checked: int = 0
    alerts_opened: int = 0
    stations_failed: int = 0


async def create_alert(db: Session, station_id: int, alert_type: AlertType, description: str,
                       now: Optional[datetime] = None) -> Alert:
    """Create and persist an alert record. Always commits immediately."""
    alert = Alert(station_id=station_id, type=alert_type.value, status=AlertStatus.OPEN.value,
                  description=description, created_at=now or utcnow())
    db.add(alert)
    db.commit()
    logger.warning(f"[ALERT][{alert_type.value}] station={station_id} {description}")
    # Extend here: push notification, SMS, email, etc.
    return alert


def has_open_alert(db: Session, station_id: int, alert_type: AlertType) -> bool:
    return db.query(Alert.id).filter(
        Alert.station_id == station_id,
        Alert.type == alert_type.value,
        Alert.status == AlertStatus.OPEN.value,
    ).first() is not None


def _conditions(db: Session, station_id: int, now: datetime) -> list[tuple[AlertType, str]]:
    """Alert conditions currently true for a station, with operator-facing text."""
    found = []
    status = latest_status(db, station_id)

    no_update_cutoff = now - timedelta(minutes=settings.ALERT_NO_UPDATE_MINUTES)
    if status is None:
        found.append((AlertType.NO_UPDATE, "No status has ever been reported"))
    elif status.updated_at < no_update_cutoff:
        found.append((AlertType.NO_UPDATE,
                      f"No status update since {status.updated_at:%Y-%m-%d %H:%M} UTC"))

    if status is not None and status.waiting_time_max is not None \
            and status.waiting_time_max > settings.ALERT_HIGH_WAIT_MINUTES:
        found.append((AlertType.HIGH_WAIT,
                      f"Estimated wait up to {status.waiting_time_max} min ({status.fuel_type})"))

    since = now - timedelta(minutes=settings.ALERT_CONTRADICTION_MINUTES)
    statuses = [row.fuel_status for row in db.query(Contribution.fuel_status).filter(
        Contribution.station_id == station_id,
        Contribution.created_at >= since,
        Contribution.fuel_status.isnot(None),
    ).all()]
    if has_contradiction(statuses):
        found.append((AlertType.CONTRADICTION,
                      f"Conflicting reports in the last {settings.ALERT_CONTRADICTION_MINUTES} min: "
                      f"{', '.join(sorted(set(statuses)))}"))
    return found


async def evaluate_station(db: Session, station_id: int, now: datetime) -> int:
    """Open alerts for one station. Returns how many were opened."""
    opened = 0
    for alert_type, description in _conditions(db, station_id, now):
        if has_open_alert(db, station_id, alert_type):
            continue
        await create_alert(db, station_id, alert_type, description, now=now)
        opened += 1
    return opened


async def generate_alerts(db: Session, now: Optional[datetime] = None) -> SweepSummary:
    """One alert sweep over all active stations. Each station is evaluated in isolation."""
    now = now or utcnow()
    summary = SweepSummary()
    station_ids = [row.id for row in db.query(Station.id).filter(Station.is_active.is_(True)).all()]

    for station_id in station_ids:
        summary.stations_checked += 1
        try:
            summary.alerts_opened += await evaluate_station(db, station_id, now)
        except Exception as e:
            db.rollback()
            summary.stations_failed += 1
            logger.error(f"[ALERT] Sweep failed for station {station_id}: {e}", exc_info=True)

    logger.info(f"[ALERT] Sweep done — stations={summary.stations_checked} "
                f"opened={summary.alerts_opened} failed={summary.stations_failed}")
    return summary


def resolve_alert(db: Session, alert_id: int, now: Optional[datetime] = None) -> Alert:
    """Operator action: OPEN → RESOLVED. The only transition an alert has."""
    alert = db.query(Alert).filter(Alert.id == alert_id).first()
    if not alert:
        raise AlertNotFound(f"Alert {alert_id} not found")
    if alert.status == AlertStatus.RESOLVED.value:
        raise AlertAlreadyResolved(f"Alert {alert_id} is already resolved")
    alert.status = AlertStatus.RESOLVED.value
    alert.resolved_at = now or utcnow()
    db.commit()
    logger.info(f"[ALERT] Resolved alert {alert_id} ({alert.type}) for station {alert.station_id}")
    return alert
