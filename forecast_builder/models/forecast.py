"""Weather data models for one forecast image run."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Coordinate:
    lat: str  # decimal string, kept exactly as supplied
    lon: str

    def __str__(self) -> str:
        return f"{self.lat},{self.lon}"


@dataclass(frozen=True)
class GridReference:
    forecast_url: str


@dataclass(frozen=True)
class ForecastPeriod:
    number: int
    name: str
    start_time: str
    end_time: str
    is_daytime: bool
    temperature: int
    temperature_unit: str
    wind_speed: str = ""
    wind_direction: str = ""
    icon: str = ""
    short_forecast: str = ""
    detailed_forecast: str = ""

    @property
    def temperature_label(self) -> str:
        return f"{self.temperature} {self.temperature_unit}"


@dataclass(frozen=True)
class Alert:
    message_type: str
    status: str
    severity: str
    event: str
    headline: str


@dataclass(frozen=True)
class ForecastSummary:
    periods: list[ForecastPeriod]
    alerts: list[Alert] = field(default_factory=list)
    generated_at: str = ""

    @property
    def first_alert(self) -> Alert | None:
        return self.alerts[0] if self.alerts else None
