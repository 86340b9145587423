"""Operator alerts — list, sweep trigger, resolve."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.database import get_db
from app.models.alert import Alert
from app.models.enums import AlertStatus, AlertType
from app.schemas.alert import AlertOut, SweepResult
from app.services.alert_service import generate_alerts, resolve_alert
from typing import Optional

router = APIRouter()


@router.get("/alerts", response_model=list[AlertOut], summary="All alerts — filterable by type")
def get_all_alerts(
    alert_type: Optional[AlertType] = None,
    status: Optional[AlertStatus] = None,
    station_id: Optional[int] = None,
    limit: int = 50,
    db: Session = Depends(get_db)
):
    """Combined alerts endpoint. Filter by alert_type, status or station."""
    q = db.query(Alert)
    if alert_type:
        q = q.filter(Alert.type == alert_type.value)
    if status:
        q = q.filter(Alert.status == status.value)
    if station_id is not None:
        q = q.filter(Alert.station_id == station_id)
    return q.order_by(Alert.created_at.desc(), Alert.id.desc()).limit(limit).all()


@router.post("/alerts/generate", response_model=SweepResult, summary="Run one alert sweep")
async def run_alert_sweep(db: Session = Depends(get_db)):
    """Called by the scheduler. One sweep per call, nothing runs in the background."""
    summary = await generate_alerts(db)
    return SweepResult(
        stations_checked=summary.stations_checked,
        alerts_opened=summary.alerts_opened,
        stations_failed=summary.stations_failed,
    )


@router.put("/alerts/{alert_id}/resolve", summary="Resolve an alert")
def resolve(alert_id: int, db: Session = Depends(get_db)):
    """Mark an alert as resolved. Unknown → 404, already resolved → 409."""
    alert = resolve_alert(db, alert_id)
    return {"id": alert.id, "status": "resolved"}
