"""Shared test fixtures."""

import io
import json
from pathlib import Path

import httpx
import pytest
import respx
import yaml
from PIL import Image

from forecast_builder.config.schema import BuilderConfig, FontSpec, ServiceConfig
from forecast_builder.models.image import IconBitmap

TEST_BASE_URL = "https://test-nws.example.com"
TEST_HOST = "test-nws.example.com"
TEST_USER_AGENT = "forecasts@example.com"
FIXTURE_DIR = Path(__file__).parent / "fixtures"


def load_fixture(name: str) -> dict:
    with open(FIXTURE_DIR / name) as f:
        return json.load(f)


def png_bytes(width: int = 4, height: int = 4, color=(255, 0, 0, 255)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGBA", (width, height), color).save(buf, format="PNG")
    return buf.getvalue()


def mock_weather_service(
    points: dict,
    forecast: dict,
    alerts: dict,
    icon: bytes | None = None,
    lat: str = "41.85",
    lon: str = "-70.65",
) -> dict[str, respx.Route]:
    """Register weather.gov routes on the active respx router."""
    return {
        "points": respx.get(host=TEST_HOST, path=f"/points/{lat},{lon}").mock(
            return_value=httpx.Response(200, json=points)
        ),
        "forecast": respx.get(host=TEST_HOST, path="/gridpoints/BOX/88,55/forecast").mock(
            return_value=httpx.Response(200, json=forecast)
        ),
        "alerts": respx.get(host=TEST_HOST, path="/alerts/active").mock(
            return_value=httpx.Response(200, json=alerts)
        ),
        "icons": respx.get(host=TEST_HOST, path__startswith="/icons/").mock(
            return_value=httpx.Response(200, content=icon or png_bytes())
        ),
    }


class RecordingCanvas:
    """Canvas that records draw calls. Text measures 10px per character."""

    def __init__(self, width: int, height: int, background: str, fonts: dict[str, FontSpec]):
        self.width = width
        self.height = height
        self.background = background
        self.fonts = fonts
        self.calls: list[tuple] = []

    def measure_text(self, text: str, font: str) -> float:
        return 10.0 * len(text)

    def fill_text(self, text: str, x: float, y: float, font: str, color: str) -> None:
        self.calls.append(("fill_text", text, x, y, font, color))

    def stroke_line(self, x1, y1, x2, y2, color, width) -> None:
        self.calls.append(("stroke_line", x1, y1, x2, y2, color, width))

    def draw_bitmap(self, bitmap: IconBitmap, x, y, width, height) -> None:
        self.calls.append(("draw_bitmap", bitmap, x, y, width, height))

    def encode(self, image_format, quality: int) -> bytes:
        self.calls.append(("encode", image_format, quality))
        return b"encoded:" + image_format.value.encode()

    def texts(self) -> list[str]:
        return [c[1] for c in self.calls if c[0] == "fill_text"]

    def text_calls(self, text: str) -> list[tuple]:
        return [c for c in self.calls if c[0] == "fill_text" and c[1] == text]


class CanvasRecorder:
    """Canvas factory that keeps every RecordingCanvas it creates."""

    def __init__(self) -> None:
        self.canvases: list[RecordingCanvas] = []

    def __call__(self, width, height, background, fonts) -> RecordingCanvas:
        canvas = RecordingCanvas(width, height, background, fonts)
        self.canvases.append(canvas)
        return canvas

    @property
    def last(self) -> RecordingCanvas:
        return self.canvases[-1]


@pytest.fixture
def recorder() -> CanvasRecorder:
    return CanvasRecorder()


@pytest.fixture
def test_config() -> BuilderConfig:
    """Config pointed at the mocked service with retries that do not sleep."""
    return BuilderConfig(
        service=ServiceConfig(
            base_url=TEST_BASE_URL,
            user_agent=TEST_USER_AGENT,
            retry_delay_seconds=0.0,
        ),
    )


@pytest.fixture
def points_json() -> dict:
    return load_fixture("nws_points.json")


@pytest.fixture
def forecast_json() -> dict:
    return load_fixture("nws_forecast.json")


@pytest.fixture
def alerts_empty_json() -> dict:
    return load_fixture("nws_alerts_empty.json")


@pytest.fixture
def alerts_active_json() -> dict:
    return load_fixture("nws_alerts_active.json")


@pytest.fixture
def icon_png() -> bytes:
    return png_bytes()


@pytest.fixture
def config_yaml_path(tmp_path: Path) -> Path:
    """Write a minimal valid config YAML and return its path."""
    data = {
        "service": {"base_url": TEST_BASE_URL, "user_agent": TEST_USER_AGENT},
        "layout": {"alert_max_lines": 2},
    }
    path = tmp_path / "test_config.yaml"
    with open(path, "w") as f:
        yaml.dump(data, f)
    return path


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory."""
    return FIXTURE_DIR
