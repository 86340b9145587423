# TajiCheck — Database Models
# Import all models here for SQLAlchemy discovery

from app.models.station import Station                 # noqa
from app.models.station_status import StationStatus    # noqa
from app.models.contribution import Contribution       # noqa
from app.models.alert import Alert                     # noqa
