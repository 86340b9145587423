"""Closed enumerations shared by models, schemas and services."""

import enum


class FuelType(str, enum.Enum):
    ESSENCE = "ESSENCE"
    GASOIL = "GASOIL"


class Availability(str, enum.Enum):
    AVAILABLE = "AVAILABLE"
    LIMITED = "LIMITED"
    OUT = "OUT"


class SourceType(str, enum.Enum):
    OFFICIAL = "OFFICIAL"   # station manager
    TRUSTED = "TRUSTED"     # vetted reporter
    PUBLIC = "PUBLIC"       # anonymous / general user


class QueueCategory(str, enum.Enum):
    Q_0_10 = "Q_0_10"
    Q_10_30 = "Q_10_30"
    Q_30_60 = "Q_30_60"
    Q_60_PLUS = "Q_60_PLUS"


class AlertType(str, enum.Enum):
    NO_UPDATE = "NO_UPDATE"
    HIGH_WAIT = "HIGH_WAIT"
    CONTRADICTION = "CONTRADICTION"


class AlertStatus(str, enum.Enum):
    OPEN = "OPEN"
    RESOLVED = "RESOLVED"
