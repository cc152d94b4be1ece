"""Public entry point: coordinate in, encoded forecast image out."""

import logging

from forecast_builder.config.loader import require_identity
from forecast_builder.config.schema import BuilderConfig, LocationConfig
from forecast_builder.ingest.fetcher import RetryingFetcher
from forecast_builder.ingest.weather_data import WeatherDataPipeline
from forecast_builder.models.errors import FailureKind, PipelineFailure, Stage
from forecast_builder.models.forecast import Coordinate
from forecast_builder.models.image import RenderedImage
from forecast_builder.models.reporting import LocationResult
from forecast_builder.render.canvas import CanvasFactory, PillowCanvas
from forecast_builder.render.icons import IconCache
from forecast_builder.render.renderer import ForecastRenderer
from forecast_builder.storage.image_writer import FileImageWriter
from forecast_builder.storage.kv_cache import ByteCache

logger = logging.getLogger(__name__)


def produce_forecast_image(
    coordinate: Coordinate,
    title: str,
    config: BuilderConfig,
    cache: ByteCache,
    canvas_factory: CanvasFactory = PillowCanvas,
) -> RenderedImage | PipelineFailure:
    """Fetch the forecast for a coordinate and render it.

    Raises ConfigurationError if no contact identity is configured; every
    other failure is returned as a PipelineFailure.
    """
    user_agent = require_identity(config)
    service = config.service

    fetcher = RetryingFetcher(
        user_agent,
        timeout=service.timeout_seconds,
        retry_delay=service.retry_delay_seconds,
        track_timing=service.track_timing,
    )
    pipeline = WeatherDataPipeline(
        fetcher, base_url=service.base_url, alerts_required=service.alerts_required
    )
    summary = pipeline.fetch(coordinate)
    if isinstance(summary, PipelineFailure):
        return summary

    icons = IconCache(
        cache,
        user_agent,
        timeout=service.timeout_seconds,
        icon_size=service.icon_size,
        expiration_days=config.cache.icon_expiration_days,
    )
    renderer = ForecastRenderer(icons, config.layout, canvas_factory=canvas_factory)
    image = renderer.render(summary, title)
    if image is None:
        return PipelineFailure(
            stage=Stage.RENDER, kind=FailureKind.NO_PERIODS, detail="no forecast periods"
        )
    return image


class ForecastBuilder:
    def __init__(
        self,
        config: BuilderConfig,
        cache: ByteCache,
        writer: FileImageWriter,
        canvas_factory: CanvasFactory = PillowCanvas,
    ):
        self.config = config
        self.cache = cache
        self.writer = writer
        self.canvas_factory = canvas_factory

    def build(self, location: LocationConfig) -> RenderedImage | PipelineFailure:
        logger.debug("Request for %s", location.location)
        return produce_forecast_image(
            Coordinate(lat=location.lat, lon=location.lon),
            f"Forecast for {location.location}",
            self.config,
            self.cache,
            canvas_factory=self.canvas_factory,
        )

    def create_image(self, location: LocationConfig) -> LocationResult:
        """Build one location's image and write it. Nothing is written on failure."""
        try:
            image = self.build(location)
            if isinstance(image, PipelineFailure):
                logger.error("No image for %s: %s", location.location, image)
                return LocationResult(
                    location.location, location.file_name, False, error=str(image)
                )
            logger.info("Writing %s", location.file_name)
            self.writer.save_file(location.file_name, image.data)
        except Exception as e:
            logger.exception("Error building forecast for %s", location.location)
            return LocationResult(location.location, location.file_name, False, error=str(e))

        return LocationResult(
            location.location, location.file_name, True, image_bytes=image.size_bytes
        )
