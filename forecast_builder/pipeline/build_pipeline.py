"""Build pipeline: one image per configured location."""

import logging
import time
import uuid

from forecast_builder.builder import ForecastBuilder
from forecast_builder.config.schema import BuilderConfig
from forecast_builder.models.reporting import BuildSummary
from forecast_builder.render.canvas import CanvasFactory, PillowCanvas
from forecast_builder.reporting.formatters import format_summary_text
from forecast_builder.storage.image_writer import FileImageWriter
from forecast_builder.storage.kv_cache import ByteCache

logger = logging.getLogger(__name__)


class BuildPipeline:
    def __init__(
        self,
        config: BuilderConfig,
        cache: ByteCache,
        writer: FileImageWriter,
        canvas_factory: CanvasFactory = PillowCanvas,
    ):
        self.config = config
        self.builder = ForecastBuilder(config, cache, writer, canvas_factory=canvas_factory)

    def run(self, only: str | None = None) -> BuildSummary:
        """Build every enabled location (or just the one named ``only``)."""
        start_time = time.monotonic()
        summary = BuildSummary(run_id=str(uuid.uuid4()))

        locations = [loc for loc in self.config.locations if loc.enabled]
        if only is not None:
            locations = [
                loc for loc in locations if only in (loc.location, loc.file_name)
            ]
            if not locations:
                summary.errors.append(f"No enabled location named {only!r}")

        for location in locations:
            result = self.builder.create_image(location)
            summary.results.append(result)
            summary.locations_attempted += 1
            if result.succeeded:
                summary.locations_succeeded += 1
            else:
                summary.locations_failed += 1

        summary.duration_seconds = time.monotonic() - start_time
        logger.info("\n%s", format_summary_text(summary))
        return summary
