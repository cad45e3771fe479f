from dataclasses import asdict, dataclass
from typing import Any, Dict, Mapping

from sqlalchemy import BigInteger, Column, Float, Integer, String

from .database import Base

TABLE_NAME = "weather_reports"

# precipitation keeps the historical "percipitation" spelling on the wire and in the table
METRIC_FIELDS = (
    "temperature",
    "humidity",
    "percipitation",
    "pm10",
    "pm25",
    "co2",
    "tvoc",
)


class WeatherReportRow(Base):
    __tablename__ = TABLE_NAME

    id = Column(Integer, primary_key=True, autoincrement=True)
    oid = Column(String(64), nullable=False, unique=True)
    temperature = Column(Float, nullable=True)  # celsius
    humidity = Column(Float, nullable=True)
    percipitation = Column(Float, nullable=True)
    pm10 = Column(Float, nullable=True)
    pm25 = Column(Float, nullable=True)
    co2 = Column(Float, nullable=True)
    tvoc = Column(Float, nullable=True)
    device_type = Column(String(32), nullable=True)  # indoor, outdoor, other
    timestamp = Column(BigInteger, nullable=True, default=0, server_default="0")


def _to_float(value: Any) -> float | None:
    if value is None:
        return None
    return float(value)


@dataclass
class Reading:
    """One measurement event from one device.

    ``id`` is assigned by the database and stays 0 until the row is read back.
    A metric left as None has not been reported yet; it is never written as NULL
    over an existing value.
    """

    oid: str
    device_type: str
    timestamp: int
    id: int = 0
    temperature: float | None = None
    humidity: float | None = None
    percipitation: float | None = None
    pm10: float | None = None
    pm25: float | None = None
    co2: float | None = None
    tvoc: float | None = None

    def metrics(self) -> Dict[str, float | None]:
        return {name: getattr(self, name) for name in METRIC_FIELDS}

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Reading":
        return cls(
            id=row["id"],
            oid=row["oid"],
            device_type=row.get("device_type") or "",
            timestamp=int(row.get("timestamp") or 0),
            **{name: _to_float(row.get(name)) for name in METRIC_FIELDS},
        )
