"""
Contribution ingest + recompute orchestration.

Order on every report:
  1. append the Contribution and commit it (ground truth survives anything below)
  2. upsert StationStatus availability per affected fuel type (last write wins)
  3. recompute waiting time + reliability and persist them on the station's status rows

A status write denied by the authorization policy skips that fuel type only and
comes back to the caller as a warning. Storage errors after step 1 are rolled
back and reported as warnings too — the report itself is already accepted.
"""

from datetime import datetime
from typing import Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from app.models.contribution import Contribution
from app.models.station import Station
from app.models.enums import FuelType
from app.schemas.contribution import ContributionCreate, IngestResult
from app.schemas.station_status import StatusEdit
from app.services.waiting_time_service import WaitingTime, compute_waiting_time
from app.services.reliability_service import compute_reliability_score
from app.services.status_service import (
    StatusWriteRejected, upsert_station_status, apply_derived_fields,
)
from app.utils.clock import utcnow
from app.utils.logger import get_logger

logger = get_logger(__name__)

STATUS_REJECTED_WARNING = (
    "Your report was received. Status changes from your account are validated "
    "by a trusted reporter before they are shown."
)
STATUS_FAILED_WARNING = "Your report was received but the station status could not be updated."
RECOMPUTE_FAILED_WARNING = "Your report was received. Estimates will refresh on the next update."


class StationNotFound(Exception):
    def __init__(self, station_id: int):
        self.station_id = station_id
        super().__init__(f"Station {station_id} not found")


class StationInactive(Exception):
    def __init__(self, station_id: int):
        self.station_id = station_id
        super().__init__(f"Station {station_id} is not active")


def _require_active_station(db: Session, station_id: int) -> Station:
    station = db.query(Station).filter(Station.id == station_id).first()
    if not station:
        raise StationNotFound(station_id)
    if not station.is_active:
        raise StationInactive(station_id)
    return station


def recompute_station(db: Session, station_id: int, now: Optional[datetime] = None) -> tuple[WaitingTime, int]:
    """
    Refresh the derived fields of every status row of a station.
    The station row is locked for the duration so two recomputes for the same
    station cannot interleave their writes. Storage errors propagate.
    """
    now = now or utcnow()
    station = db.query(Station).filter(Station.id == station_id).with_for_update().first()
    if not station:
        raise StationNotFound(station_id)

    waiting_time = compute_waiting_time(db, station_id)
    score = compute_reliability_score(db, station_id, now=now)
    rows = apply_derived_fields(db, station_id, waiting_time, score)
    db.commit()

    logger.info(f"[RECOMPUTE] station={station_id} wait={waiting_time.min}-{waiting_time.max}min "
                f"score={score} rows={rows}")
    return waiting_time, score


def _apply_statuses(db: Session, station_id: int, fuel_types: list[FuelType], availability, source_type,
                    now: datetime, pumps_active: Optional[int], result: IngestResult):
    for fuel_type in dict.fromkeys(fuel_types):
        try:
            upsert_station_status(db, station_id, fuel_type, availability, source_type, now,
                                  pumps_active=pumps_active)
            db.commit()
            result.statuses_updated.append(fuel_type)
        except StatusWriteRejected as exc:
            db.rollback()
            logger.warning(f"[INGEST] {exc}")
            if STATUS_REJECTED_WARNING not in result.warnings:
                result.warnings.append(STATUS_REJECTED_WARNING)
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error(f"[INGEST] Status write failed for station {station_id}/{fuel_type.value}: {exc}",
                         exc_info=True)
            if STATUS_FAILED_WARNING not in result.warnings:
                result.warnings.append(STATUS_FAILED_WARNING)


def _recompute_after_ingest(db: Session, station_id: int, now: datetime, result: IngestResult):
    try:
        recompute_station(db, station_id, now=now)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error(f"[INGEST] Recompute failed for station {station_id}: {exc}", exc_info=True)
        result.warnings.append(RECOMPUTE_FAILED_WARNING)


async def ingest_contribution(db: Session, submission: ContributionCreate,
                              now: Optional[datetime] = None) -> IngestResult:
    """Record a user report and refresh the station state it affects."""
    now = now or utcnow()
    _require_active_station(db, submission.station_id)

    contribution = Contribution(
        station_id=submission.station_id,
        user_id=submission.user_id,
        source_type=submission.source_type.value,
        queue_category=submission.queue_category.value if submission.queue_category else None,
        fuel_status=submission.fuel_status.value if submission.fuel_status else None,
        photo_url=submission.photo_url,
        created_at=now,
    )
    db.add(contribution)
    db.commit()
    db.refresh(contribution)
    logger.info(f"[INGEST] contribution={contribution.id} station={submission.station_id} "
                f"src={contribution.source_type} queue={contribution.queue_category} "
                f"fuel={contribution.fuel_status}")

    result = IngestResult(contribution_id=contribution.id)
    if submission.fuel_status:
        _apply_statuses(db, submission.station_id, submission.fuel_types, submission.fuel_status,
                        submission.source_type, now, None, result)

    _recompute_after_ingest(db, submission.station_id, now, result)
    return result


async def apply_status_edit(db: Session, station_id: int, edit: StatusEdit,
                            now: Optional[datetime] = None) -> IngestResult:
    """
    Direct status edit by a station manager or trusted reporter.
    Goes through the same log → status → recompute path as a report, so the
    derived fields are never written from the edit itself.
    """
    now = now or utcnow()
    _require_active_station(db, station_id)

    contribution = Contribution(
        station_id=station_id,
        user_id=edit.user_id,
        source_type=edit.source_type.value,
        fuel_status=edit.availability.value,
        created_at=now,
    )
    db.add(contribution)
    db.commit()
    db.refresh(contribution)
    logger.info(f"[EDIT] contribution={contribution.id} station={station_id} "
                f"src={contribution.source_type} fuel={contribution.fuel_status} pumps={edit.pumps_active}")

    result = IngestResult(contribution_id=contribution.id)
    _apply_statuses(db, station_id, edit.fuel_types, edit.availability, edit.source_type,
                    now, edit.pumps_active, result)
    _recompute_after_ingest(db, station_id, now, result)
    return result
