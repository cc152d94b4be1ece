"""Composes a forecast summary into a single image.

Layout (default 1920x1080):

    +--------------------------------------------------+
    |               Forecast for <location>            |
    |  Today                               Tonight     |
    |  56 F      <paragraph text>          47 F        |
    |  [icon]                              [icon]      |
    |                                      Tomorrow    |
    |                                      60 F        |
    |                                      [icon]      |
    |  Active Alerts                                   |
    |  <alert headline or "no active alerts">          |
    +--------------------------------------------------+

Every coordinate comes from LayoutConfig.
"""

import logging
from functools import partial

from forecast_builder.config.schema import ColumnConfig, LayoutConfig, ParagraphSource
from forecast_builder.models.forecast import ForecastPeriod, ForecastSummary
from forecast_builder.models.image import RenderedImage
from forecast_builder.render.canvas import (
    Canvas,
    CanvasFactory,
    PillowCanvas,
    center_text,
    center_underline,
)
from forecast_builder.render.icons import IconCache
from forecast_builder.render.text_wrap import wrap_text

logger = logging.getLogger(__name__)

TITLE_FONT = "title"
LABEL_FONT = "label"
BOLD_FONT = "bold"

IMAGE_TYPES = {"jpeg": "jpg", "png": "png"}


class ForecastRenderer:
    def __init__(
        self,
        icons: IconCache | None,
        layout: LayoutConfig | None = None,
        canvas_factory: CanvasFactory = PillowCanvas,
    ):
        self.icons = icons
        self.layout = layout or LayoutConfig()
        self.canvas_factory = canvas_factory

    def render(self, summary: ForecastSummary, title: str) -> RenderedImage | None:
        if not summary.periods:
            logger.error("No forecast periods to render for %r", title)
            return None

        layout = self.layout
        canvas = self.canvas_factory(
            layout.width, layout.height, layout.colors.background, layout.fonts
        )

        center_text(canvas, title, layout.width / 2, layout.title_offset_y, TITLE_FONT, layout.colors.title)

        for period, column in zip(summary.periods, layout.columns):
            self._draw_period(canvas, period, column)

        self._draw_paragraph(canvas, summary.periods[0])
        self._draw_alerts(canvas, summary)

        data = canvas.encode(layout.image_format, layout.jpeg_quality)
        logger.debug("Rendered %r: %d bytes", title, len(data))
        return RenderedImage(data=data, image_type=IMAGE_TYPES[layout.image_format.value])

    def _draw_period(self, canvas: Canvas, period: ForecastPeriod, column: ColumnConfig) -> None:
        layout = self.layout
        center_x = column.x + column.icon_size / 2

        label_y = column.y + layout.label_offset_y
        center_text(canvas, period.name, center_x, label_y, BOLD_FONT, layout.colors.label)
        center_underline(
            canvas, period.name, center_x, label_y, BOLD_FONT, layout.colors.label,
            offset=layout.underline_offset, line_width=layout.underline_width,
        )

        temp_color = layout.colors.daytime_temp if period.is_daytime else layout.colors.nighttime_temp
        center_text(
            canvas, period.temperature_label, center_x, column.y + layout.temp_offset_y,
            BOLD_FONT, temp_color,
        )

        if self.icons is None or not period.icon:
            return
        icon = self.icons.resolve(period.icon)
        if icon is None:
            return
        logger.debug(
            "Icon %dx%d scaled to %d at %d,%d",
            icon.width, icon.height, column.icon_size, column.x, column.y + layout.icon_offset_y,
        )
        canvas.draw_bitmap(
            icon, column.x, column.y + layout.icon_offset_y, column.icon_size, column.icon_size
        )

    def _draw_paragraph(self, canvas: Canvas, period: ForecastPeriod) -> None:
        layout = self.layout
        if layout.paragraph_source == ParagraphSource.DETAILED:
            text = period.detailed_forecast or period.short_forecast
        else:
            text = period.short_forecast or period.detailed_forecast

        measure = partial(canvas.measure_text, font=LABEL_FONT)
        lines = wrap_text(text, measure, layout.paragraph_width, layout.paragraph_max_lines)
        for i, line in enumerate(lines):
            canvas.fill_text(
                line, layout.paragraph_x, layout.paragraph_y + i * layout.paragraph_spacing_y,
                LABEL_FONT, layout.colors.label,
            )

    def _draw_alerts(self, canvas: Canvas, summary: ForecastSummary) -> None:
        layout = self.layout
        color = layout.colors.alert

        canvas.fill_text(layout.alert_label, layout.alert_x, layout.alert_label_y, LABEL_FONT, color)
        label_width = canvas.measure_text(layout.alert_label, LABEL_FONT)
        rule_y = layout.alert_label_y + layout.underline_offset
        canvas.stroke_line(
            layout.alert_x, rule_y, layout.alert_x + label_width, rule_y, color, layout.underline_width
        )

        alert = summary.first_alert
        text = alert.headline if alert is not None and alert.headline else layout.no_alerts_text

        measure = partial(canvas.measure_text, font=LABEL_FONT)
        lines = wrap_text(text, measure, layout.alert_width, layout.alert_max_lines)
        for i, line in enumerate(lines):
            canvas.fill_text(
                line, layout.alert_x, layout.alert_y + i * layout.alert_spacing_y, LABEL_FONT, color
            )
