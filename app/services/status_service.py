"""
StationStatus writes: availability upsert and derived-field persistence.

The availability upsert is a single INSERT … ON CONFLICT (station_id, fuel_type)
DO UPDATE on PostgreSQL and SQLite, so concurrent reports for the same pair
cannot create a second row. Other dialects fall back to read-then-branch.
"""

from datetime import datetime
from typing import Optional
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.orm import Session
from app.models.station_status import StationStatus
from app.models.enums import Availability, FuelType, SourceType
from app.services.waiting_time_service import WaitingTime
from app.config import settings
from app.utils.logger import get_logger

logger = get_logger(__name__)

# SQLSTATE raised by PostgreSQL when a row-level security policy denies a write
INSUFFICIENT_PRIVILEGE = "42501"


class StatusWriteRejected(Exception):
    """A status write was denied by the authorization policy."""

    def __init__(self, station_id: int, fuel_type: str, source_type: str, reason: str):
        self.station_id = station_id
        self.fuel_type = fuel_type
        self.source_type = source_type
        super().__init__(f"Status write for station {station_id}/{fuel_type} "
                         f"from {source_type} rejected: {reason}")


def _value(v):
    return v.value if hasattr(v, "value") else v


def check_write_policy(station_id: int, fuel_type: FuelType, source_type: SourceType):
    if _value(source_type) not in settings.STATUS_WRITE_SOURCES:
        raise StatusWriteRejected(station_id, _value(fuel_type), _value(source_type),
                                  "source not allowed to update status")


def _is_policy_denial(exc: DBAPIError) -> bool:
    return getattr(exc.orig, "pgcode", None) == INSUFFICIENT_PRIVILEGE


def _dialect_insert(db: Session):
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        from sqlalchemy.dialects.postgresql import insert
        return insert
    if dialect == "sqlite":
        from sqlalchemy.dialects.sqlite import insert
        return insert
    return None


def _read_then_write(db: Session, values: dict, updates: dict):
    row = db.query(StationStatus).filter(
        StationStatus.station_id == values["station_id"],
        StationStatus.fuel_type == values["fuel_type"],
    ).first()
    if row:
        for key, val in updates.items():
            setattr(row, key, val)
        # Surface a policy denial here, not at the caller's commit
        db.flush()
        return
    try:
        with db.begin_nested():
            db.add(StationStatus(**values))
    except IntegrityError:
        # Lost the insert race; the other writer's row exists now
        db.query(StationStatus).filter(
            StationStatus.station_id == values["station_id"],
            StationStatus.fuel_type == values["fuel_type"],
        ).update(updates)


def upsert_station_status(
    db: Session,
    station_id: int,
    fuel_type: FuelType,
    availability: Availability,
    source_type: SourceType,
    now: datetime,
    pumps_active: Optional[int] = None,
):
    """
    Set availability + last_update_source for (station, fuel_type), last write wins.
    Does not commit. Raises StatusWriteRejected on a policy denial; the caller
    must roll back the session before reusing it.
    """
    check_write_policy(station_id, fuel_type, source_type)

    values = {
        "station_id": station_id,
        "fuel_type": _value(fuel_type),
        "availability": _value(availability),
        "last_update_source": _value(source_type),
        "reliability_score": 0,
        "updated_at": now,
    }
    updates = {
        "availability": values["availability"],
        "last_update_source": values["last_update_source"],
        "updated_at": now,
    }
    if pumps_active is not None:
        values["pumps_active"] = pumps_active
        updates["pumps_active"] = pumps_active

    try:
        insert = _dialect_insert(db)
        if insert is None:
            _read_then_write(db, values, updates)
        else:
            stmt = insert(StationStatus).values(**values)
            stmt = stmt.on_conflict_do_update(
                index_elements=["station_id", "fuel_type"],
                set_={key: stmt.excluded[key] for key in updates},
            )
            db.execute(stmt)
    except DBAPIError as exc:
        if _is_policy_denial(exc):
            raise StatusWriteRejected(station_id, values["fuel_type"], values["last_update_source"],
                                      "denied by row-level security") from exc
        raise

    logger.info(f"[STATUS] station={station_id} {values['fuel_type']} → "
                f"{values['availability']} ({values['last_update_source']})")


def apply_derived_fields(db: Session, station_id: int, waiting_time: WaitingTime, reliability_score: int) -> int:
    """Write recomputed estimates onto every status row of the station. Does not commit."""
    updated = db.query(StationStatus).filter(StationStatus.station_id == station_id).update(
        {
            StationStatus.waiting_time_min: waiting_time.min,
            StationStatus.waiting_time_max: waiting_time.max,
            StationStatus.reliability_score: reliability_score,
        },
        synchronize_session="fetch",
    )
    return updated


def latest_status(db: Session, station_id: int) -> Optional[StationStatus]:
    """Most recently updated status row across fuel types."""
    return (
        db.query(StationStatus)
        .filter(StationStatus.station_id == station_id)
        .order_by(StationStatus.updated_at.desc())
        .first()
    )
