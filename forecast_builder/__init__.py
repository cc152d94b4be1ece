"""Render weather.gov forecasts and active alerts to a single image."""

from forecast_builder.builder import ForecastBuilder, produce_forecast_image
from forecast_builder.models.errors import PipelineFailure
from forecast_builder.models.forecast import Coordinate
from forecast_builder.models.image import RenderedImage

__all__ = [
    "Coordinate",
    "ForecastBuilder",
    "PipelineFailure",
    "RenderedImage",
    "produce_forecast_image",
]
