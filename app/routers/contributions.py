"""
Contribution submission + per-station contribution log viewer.
POST /contributions                  — the single write entry point for user reports.
GET  /stations/{id}/contributions    — newest-first log with optional filters.
"""

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session
from datetime import timedelta
from typing import Optional
from app.database import get_db
from app.models.contribution import Contribution
from app.models.enums import SourceType
from app.schemas.contribution import ContributionCreate, ContributionOut, IngestResult
from app.services.ingest_service import ingest_contribution, StationNotFound, StationInactive
from app.utils.clock import utcnow
from app.utils.security import has_valid_api_key
from app.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.post("/contributions", response_model=IngestResult, summary="Submit a station report")
async def submit_contribution(body: ContributionCreate, request: Request, db: Session = Depends(get_db)):
    """
    Records the report, updates availability for the affected fuel types and
    refreshes estimates. A status change refused by policy still returns
    'accepted' with a warning.

    Anonymous callers always report as PUBLIC; OFFICIAL/TRUSTED reports need a
    valid X-API-Key.
    """
    if body.source_type != SourceType.PUBLIC and not has_valid_api_key(request):
        logger.warning(f"Unauthenticated {body.source_type.value} report for station "
                       f"{body.station_id} downgraded to PUBLIC")
        body = body.model_copy(update={"source_type": SourceType.PUBLIC})
    try:
        return await ingest_contribution(db, body)
    except (StationNotFound, StationInactive) as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/stations/{station_id}/contributions", response_model=list[ContributionOut],
            summary="List contributions for a station")
def list_contributions(
    station_id: int,
    has_queue: bool = False,
    has_fuel_status: bool = False,
    since_minutes: Optional[int] = None,
    limit: int = 50,
    db: Session = Depends(get_db),
):
    q = db.query(Contribution).filter(Contribution.station_id == station_id)
    if has_queue:
        q = q.filter(Contribution.queue_category.isnot(None))
    if has_fuel_status:
        q = q.filter(Contribution.fuel_status.isnot(None))
    if since_minutes is not None:
        q = q.filter(Contribution.created_at >= utcnow() - timedelta(minutes=since_minutes))
    return q.order_by(Contribution.created_at.desc(), Contribution.id.desc()).limit(limit).all()
