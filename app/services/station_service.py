"""Station registry: admin creation, soft (de)activation, brand inference."""

import re
from typing import Optional
from sqlalchemy.orm import Session
from app.models.station import Station
from app.schemas.station import StationCreate
from app.utils.clock import utcnow
from app.utils.logger import get_logger

logger = get_logger(__name__)

# Brand prefixes found in station names, e.g. "Shell Hippodrome" -> "Shell"
KNOWN_BRANDS = [
    "Oryx", "Shell", "Total", "BP", "Mobil", "Corridor", "Yara", "BCF", "CDS", "KDF",
    "Amazone", "Birgo", "Comap", "Cam Holding", "2Holding", "ADF",
]
_BRAND_RE = re.compile(r"^(" + "|".join(re.escape(b) for b in KNOWN_BRANDS) + r")\s", re.IGNORECASE)


def extract_brand_from_name(name: str, existing_brand: Optional[str] = None) -> Optional[str]:
    """Explicit brand wins; otherwise the capitalized known prefix of the name, else None."""
    if existing_brand and existing_brand.strip():
        return existing_brand.strip()
    match = _BRAND_RE.match(name.strip())
    if not match:
        return None
    brand = match.group(1)
    return brand[0].upper() + brand[1:].lower()


def create_station(db: Session, body: StationCreate) -> Station:
    now = utcnow()
    station = Station(
        name=body.name.strip(),
        brand=extract_brand_from_name(body.name, body.brand),
        municipality=body.municipality,
        neighborhood=body.neighborhood,
        latitude=body.latitude,
        longitude=body.longitude,
        is_active=body.is_active,
        created_at=now,
        updated_at=now,
    )
    db.add(station)
    db.commit()
    db.refresh(station)
    logger.info(f"[STATION] Created {station.id} '{station.name}' brand={station.brand}")
    return station


def set_station_active(db: Session, station: Station, is_active: bool) -> Station:
    station.is_active = is_active
    station.updated_at = utcnow()
    db.commit()
    logger.info(f"[STATION] {station.id} is_active={is_active}")
    return station
