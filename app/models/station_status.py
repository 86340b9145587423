"""
Station status table — current display/derived state per (station, fuel_type).
availability + last_update_source are last-write-wins from ingest;
waiting_time_* and reliability_score are recomputed from the contribution log.
"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint
from app.database import Base


class StationStatus(Base):
    __tablename__ = "station_status"
    __table_args__ = (
        UniqueConstraint("station_id", "fuel_type", name="uq_station_status_station_fuel"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    station_id = Column(Integer, ForeignKey("stations.id"), nullable=False, index=True)
    fuel_type = Column(String(20), nullable=False)           # ESSENCE | GASOIL
    availability = Column(String(20), nullable=False)        # AVAILABLE | LIMITED | OUT
    pumps_active = Column(Integer)
    waiting_time_min = Column(Integer)                       # minutes, null = unknown
    waiting_time_max = Column(Integer)
    reliability_score = Column(Integer, default=0, nullable=False)
    last_update_source = Column(String(20), nullable=False)  # OFFICIAL | TRUSTED | PUBLIC
    updated_at = Column(DateTime, nullable=False, index=True)

    def __repr__(self):
        return (f"<StationStatus {self.station_id}/{self.fuel_type} "
                f"{self.availability} score={self.reliability_score}>")
