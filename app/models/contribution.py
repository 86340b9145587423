"""
Contribution log table — append-only user/station reports.
Ground truth for waiting-time and reliability computations. Never updated or deleted.
"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from app.database import Base


class Contribution(Base):
    __tablename__ = "contributions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    station_id = Column(Integer, ForeignKey("stations.id"), nullable=False, index=True)
    user_id = Column(String(100))                      # null = anonymous
    source_type = Column(String(20), nullable=False)   # OFFICIAL | TRUSTED | PUBLIC
    queue_category = Column(String(20))                # Q_0_10 | Q_10_30 | Q_30_60 | Q_60_PLUS
    fuel_status = Column(String(20))                   # AVAILABLE | LIMITED | OUT
    photo_url = Column(String(500))
    created_at = Column(DateTime, nullable=False, index=True)

    def __repr__(self):
        return f"<Contribution {self.id} station={self.station_id} src={self.source_type}>"
