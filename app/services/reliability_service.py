"""
Reliability scorer.

Score = Σ source_weight × recency over the newest contributions of the last
two hours, halved when recent reports contradict each other and cut by 30%
when the newest report is over an hour old. A relative trust indicator with
no upper bound, not a probability.
"""

import math
from datetime import datetime, timedelta
from typing import Iterable, Optional
from sqlalchemy.orm import Session
from app.models.contribution import Contribution
from app.models.enums import SourceType
from app.config import settings
from app.utils.clock import utcnow
from app.utils.logger import get_logger

logger = get_logger(__name__)

SOURCE_WEIGHTS = {
    SourceType.OFFICIAL: 10,
    SourceType.TRUSTED: 5,
    SourceType.PUBLIC: 1,
}
DEFAULT_SOURCE_WEIGHT = 1

HIGH_RELIABILITY = 50
MEDIUM_RELIABILITY = 20


def source_weight(source_type: Optional[str]) -> int:
    """Weight of a source tier; unknown tiers count as PUBLIC."""
    try:
        return SOURCE_WEIGHTS[SourceType(source_type)]
    except ValueError:
        return DEFAULT_SOURCE_WEIGHT


def recency_factor(created_at: datetime, now: datetime) -> float:
    """Linear decay from 1 (now) to 0 (window edge). Future timestamps count as now."""
    window = timedelta(minutes=settings.RELIABILITY_WINDOW_MINUTES)
    age = max(timedelta(0), now - created_at)
    return max(0.0, 1 - age / window)


def has_contradiction(fuel_statuses: Iterable[Optional[str]]) -> bool:
    return len({s for s in fuel_statuses if s is not None}) > 1


def score_contributions(contributions: list, now: datetime) -> int:
    """
    Score an already-windowed list of contributions (newest first).
    Items need source_type, created_at and fuel_status attributes.
    """
    if not contributions:
        return 0
    contributions = sorted(contributions, key=lambda c: c.created_at, reverse=True)

    score = sum(
        source_weight(c.source_type) * recency_factor(c.created_at, now)
        for c in contributions[:settings.RELIABILITY_MAX_CONTRIBUTIONS]
    )

    contradiction_window = timedelta(minutes=settings.RELIABILITY_CONTRADICTION_MINUTES)
    recent_statuses = [c.fuel_status for c in contributions if now - c.created_at < contradiction_window]
    if has_contradiction(recent_statuses):
        score *= settings.CONTRADICTION_PENALTY

    if now - contributions[0].created_at > timedelta(minutes=settings.RELIABILITY_STALE_AFTER_MINUTES):
        score *= settings.STALENESS_PENALTY

    # Half-up rounding; Python's round() would send 2.5 to 2
    return max(0, math.floor(score + 0.5))


def compute_reliability_score(db: Session, station_id: int, now: Optional[datetime] = None) -> int:
    """Reliability score for a station from its last two hours of contributions."""
    now = now or utcnow()
    window_start = now - timedelta(minutes=settings.RELIABILITY_WINDOW_MINUTES)
    contributions = (
        db.query(Contribution)
        .filter(Contribution.station_id == station_id, Contribution.created_at >= window_start)
        .order_by(Contribution.created_at.desc(), Contribution.id.desc())
        .all()
    )
    score = score_contributions(contributions, now)
    logger.debug(f"[RELIABILITY] station={station_id} window={len(contributions)} score={score}")
    return score


def reliability_label(score: Optional[int]) -> str:
    """Presentation band: HIGH ≥ 50, MEDIUM 20–49, LOW below."""
    score = score or 0
    if score >= HIGH_RELIABILITY:
        return "HIGH"
    if score >= MEDIUM_RELIABILITY:
        return "MEDIUM"
    return "LOW"
