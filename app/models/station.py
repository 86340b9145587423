"""
Stations table — identity and static attributes of each fuel station.
Created by admin action, never deleted (soft-deactivated via is_active).
"""

from sqlalchemy import Column, Integer, String, DateTime, Float, Boolean
from app.database import Base


class Station(Base):
    __tablename__ = "stations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    brand = Column(String(100))
    municipality = Column(String(100), nullable=False)
    neighborhood = Column(String(100), nullable=False)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False, index=True)
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)

    def __repr__(self):
        return f"<Station {self.id} name={self.name} active={self.is_active}>"
