from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class ReadingPayload(BaseModel):
    """Body a homebrew device posts to /api/weather_reports (JSON or form encoded)."""

    model_config = ConfigDict(allow_inf_nan=False, str_strip_whitespace=True)

    temperature: Optional[float] = None
    humidity: Optional[float] = None
    percipitation: Optional[float] = Field(
        default=None,
        validation_alias=AliasChoices("percipitation", "precipitation"),
    )
    pm10: Optional[float] = None
    pm25: Optional[float] = None
    co2: Optional[float] = None
    tvoc: Optional[float] = None
    device_type: str = Field(..., min_length=1, max_length=32)
    oid: Optional[str] = Field(default=None, min_length=1, max_length=64)

    @field_validator("temperature", "humidity", "percipitation", "pm10", "pm25", "co2", "tvoc", mode="before")
    @classmethod
    def reject_booleans(cls, value):
        # lax float parsing would store true as 1.0
        if isinstance(value, bool):
            raise ValueError("Input should be a number, not a boolean")
        return value


class ReadingOut(BaseModel):
    id: int
    oid: str
    temperature: Optional[float] = None
    humidity: Optional[float] = None
    percipitation: Optional[float] = None
    pm10: Optional[float] = None
    pm25: Optional[float] = None
    co2: Optional[float] = None
    tvoc: Optional[float] = None
    device_type: str
    timestamp: int

    model_config = ConfigDict(from_attributes=True)
