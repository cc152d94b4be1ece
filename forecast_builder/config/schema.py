"""Pydantic v2 configuration schema with strict validation."""

from enum import StrEnum

from pydantic import BaseModel, Field


class ImageFormat(StrEnum):
    JPEG = "jpeg"
    PNG = "png"


class ParagraphSource(StrEnum):
    SHORT = "short"
    DETAILED = "detailed"


class ServiceConfig(BaseModel):
    model_config = {"extra": "forbid"}

    base_url: str = "https://api.weather.gov"
    user_agent: str = ""  # contact address sent with every request
    timeout_seconds: float = Field(default=5.0, gt=0.0)
    retry_delay_seconds: float = Field(default=0.5, ge=0.0)
    alerts_required: bool = True
    icon_size: int = Field(default=150, ge=16, le=1000)
    track_timing: bool = False


class ColumnConfig(BaseModel):
    model_config = {"extra": "forbid"}

    x: int = Field(ge=0)
    y: int = Field(ge=0)
    icon_size: int = Field(gt=0)


class FontSpec(BaseModel):
    model_config = {"extra": "forbid"}

    path: str
    size: int = Field(gt=0)


class ColorConfig(BaseModel):
    model_config = {"extra": "forbid"}

    background: str = "#FFFFFF"
    title: str = "#000096"
    label: str = "#000096"
    daytime_temp: str = "#FF0000"
    nighttime_temp: str = "#0000FF"
    alert: str = "#DC0000"


def _default_columns() -> list[ColumnConfig]:
    return [
        ColumnConfig(x=100, y=100, icon_size=425),
        ColumnConfig(x=1500, y=100, icon_size=250),
        ColumnConfig(x=1500, y=580, icon_size=250),
    ]


def _default_fonts() -> dict[str, FontSpec]:
    return {
        "title": FontSpec(path="fonts/OpenSans-Bold.ttf", size=80),
        "label": FontSpec(path="fonts/OpenSans-Regular.ttf", size=50),
        "bold": FontSpec(path="fonts/OpenSans-Bold.ttf", size=60),
    }


class LayoutConfig(BaseModel):
    model_config = {"extra": "forbid"}

    width: int = Field(default=1920, gt=0)
    height: int = Field(default=1080, gt=0)
    title_offset_y: int = 80
    columns: list[ColumnConfig] = Field(default_factory=_default_columns)
    label_offset_y: int = 80
    temp_offset_y: int = 150
    icon_offset_y: int = 170
    underline_offset: int = 5
    underline_width: int = Field(default=2, ge=1)

    paragraph_x: int = 550
    paragraph_y: int = 360
    paragraph_width: int = Field(default=1000, gt=0)
    paragraph_spacing_y: int = 60
    paragraph_max_lines: int = 6
    paragraph_source: ParagraphSource = ParagraphSource.SHORT

    alert_x: int = 100
    alert_label: str = "Active Alerts"
    alert_label_y: int = 800
    alert_y: int = 870
    alert_spacing_y: int = 60
    alert_width: int = Field(default=1400, gt=0)
    alert_max_lines: int = 3
    no_alerts_text: str = "no active alerts"

    colors: ColorConfig = ColorConfig()
    fonts: dict[str, FontSpec] = Field(default_factory=_default_fonts)

    image_format: ImageFormat = ImageFormat.JPEG
    jpeg_quality: int = Field(default=80, ge=1, le=95)


class CacheConfig(BaseModel):
    model_config = {"extra": "forbid"}

    db_path: str = "data/forecast-cache.db"
    icon_expiration_days: int = Field(default=3650, ge=1)


class OutputConfig(BaseModel):
    model_config = {"extra": "forbid"}

    directory: str = "."


class LocationConfig(BaseModel):
    model_config = {"extra": "forbid"}

    file_name: str
    location: str
    lat: str
    lon: str
    time_zone: str = "America/New_York"
    enabled: bool = True


class BuilderConfig(BaseModel):
    model_config = {"extra": "forbid"}

    service: ServiceConfig = ServiceConfig()
    layout: LayoutConfig = LayoutConfig()
    cache: CacheConfig = CacheConfig()
    output: OutputConfig = OutputConfig()
    locations: list[LocationConfig] = []
