"""Stations — read with current statuses, admin create/deactivate, recompute + direct status edit."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from app.database import get_db
from app.models.station import Station
from app.models.station_status import StationStatus
from app.schemas.contribution import IngestResult
from app.schemas.station import StationCreate, StationOut, StationActiveUpdate
from app.schemas.station_status import StatusEdit, RecomputeResult, WaitingTimeOut
from app.services.ingest_service import recompute_station, apply_status_edit
from app.services.reliability_service import reliability_label
from app.services.station_service import create_station, set_station_active

router = APIRouter()


def _with_statuses(db: Session, stations: list[Station]) -> list[Station]:
    ids = [s.id for s in stations]
    by_station = {}
    if ids:
        rows = db.query(StationStatus).filter(StationStatus.station_id.in_(ids)) \
            .order_by(StationStatus.fuel_type).all()
        for row in rows:
            row.reliability_level = reliability_label(row.reliability_score)
            by_station.setdefault(row.station_id, []).append(row)
    for s in stations:
        s.statuses = by_station.get(s.id, [])
    return stations


def _get_station_or_404(db: Session, station_id: int) -> Station:
    station = db.query(Station).filter(Station.id == station_id).first()
    if not station:
        raise HTTPException(status_code=404, detail=f"Station {station_id} not found")
    return station


@router.get("/stations", response_model=list[StationOut])
def list_stations(active_only: bool = True, db: Session = Depends(get_db)):
    """All stations with their per-fuel status and reliability band."""
    q = db.query(Station)
    if active_only:
        q = q.filter(Station.is_active.is_(True))
    return _with_statuses(db, q.order_by(Station.name).all())


@router.get("/stations/{station_id}", response_model=StationOut)
def get_station(station_id: int, db: Session = Depends(get_db)):
    return _with_statuses(db, [_get_station_or_404(db, station_id)])[0]


@router.post("/stations", response_model=StationOut, status_code=201, summary="Create a station")
def add_station(body: StationCreate, db: Session = Depends(get_db)):
    """Brand is inferred from the name prefix when not given."""
    station = create_station(db, body)
    station.statuses = []
    return station


@router.put("/stations/{station_id}/active", summary="Activate or deactivate a station")
def update_station_active(station_id: int, body: StationActiveUpdate, db: Session = Depends(get_db)):
    station = set_station_active(db, _get_station_or_404(db, station_id), body.is_active)
    return {"id": station.id, "is_active": station.is_active, "status": "updated"}


@router.post("/stations/{station_id}/recompute", response_model=RecomputeResult,
             summary="Refresh waiting time + reliability")
def recompute(station_id: int, db: Session = Depends(get_db)):
    """Explicit refresh of the derived fields, e.g. after a direct status edit."""
    waiting_time, score = recompute_station(db, station_id)
    return RecomputeResult(
        station_id=station_id,
        waiting_time=WaitingTimeOut(min=waiting_time.min, max=waiting_time.max),
        reliability_score=score,
    )


@router.put("/stations/{station_id}/status", response_model=IngestResult,
            summary="Direct status edit (manager / trusted reporter)")
async def edit_status(station_id: int, body: StatusEdit, db: Session = Depends(get_db)):
    """Unknown station → 404, inactive station → 400 (mapped in app.main)."""
    return await apply_status_edit(db, station_id, body)
