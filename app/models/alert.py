"""
Alerts table — operator to-do list (NO_UPDATE, HIGH_WAIT, CONTRADICTION).
Opened by alert_service.generate_alerts, resolved only by operator action.
"""

from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey
from app.database import Base


class Alert(Base):
    __tablename__ = "alerts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    station_id = Column(Integer, ForeignKey("stations.id"), nullable=False, index=True)
    type = Column(String(30), nullable=False, index=True)
    status = Column(String(20), default="OPEN", nullable=False, index=True)
    description = Column(Text)
    created_at = Column(DateTime, nullable=False, index=True)
    resolved_at = Column(DateTime)

    def __repr__(self):
        return f"<Alert {self.id} station={self.station_id} type={self.type} status={self.status}>"
