"""Drawing surface used by the renderer.

The renderer only talks to the ``Canvas`` protocol. ``PillowCanvas`` is the
real implementation; tests substitute a recorder. Centered text and
underlines are free functions over the protocol.
"""

import io
import logging
from typing import Protocol

from PIL import Image, ImageDraw, ImageFont

from forecast_builder.config.schema import FontSpec, ImageFormat
from forecast_builder.models.image import IconBitmap

logger = logging.getLogger(__name__)


class Canvas(Protocol):
    width: int
    height: int

    def measure_text(self, text: str, font: str) -> float: ...

    def fill_text(self, text: str, x: float, y: float, font: str, color: str) -> None: ...

    def stroke_line(
        self, x1: float, y1: float, x2: float, y2: float, color: str, width: int
    ) -> None: ...

    def draw_bitmap(
        self, bitmap: IconBitmap, x: float, y: float, width: int, height: int
    ) -> None: ...

    def encode(self, image_format: ImageFormat, quality: int) -> bytes: ...


class CanvasFactory(Protocol):
    def __call__(
        self, width: int, height: int, background: str, fonts: dict[str, FontSpec]
    ) -> Canvas: ...


def center_text(canvas: Canvas, text: str, x: float, y: float, font: str, color: str) -> None:
    """Draw text horizontally centered on x, with its baseline at y."""
    width = canvas.measure_text(text, font)
    canvas.fill_text(text, x - width / 2, y, font, color)


def center_underline(
    canvas: Canvas,
    text: str,
    x: float,
    y: float,
    font: str,
    color: str,
    offset: int = 5,
    line_width: int = 2,
) -> None:
    """Draw a rule under text that was centered on x at baseline y."""
    width = canvas.measure_text(text, font)
    canvas.stroke_line(x - width / 2, y + offset, x + width / 2, y + offset, color, line_width)


def load_font(spec: FontSpec) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    try:
        return ImageFont.truetype(spec.path, spec.size)
    except OSError:
        logger.debug("Font %s not found, using default at %dpx", spec.path, spec.size)
        return ImageFont.load_default(size=spec.size)


class PillowCanvas:
    def __init__(
        self,
        width: int,
        height: int,
        background: str,
        fonts: dict[str, FontSpec],
    ):
        self.width = width
        self.height = height
        self.image = Image.new("RGB", (width, height), background)
        self._draw = ImageDraw.Draw(self.image)
        self._fonts = {name: load_font(spec) for name, spec in fonts.items()}

    def _font(self, name: str):
        try:
            return self._fonts[name]
        except KeyError:
            raise KeyError(f"Unknown font: {name}") from None

    def measure_text(self, text: str, font: str) -> float:
        return self._draw.textlength(text, font=self._font(font))

    def fill_text(self, text: str, x: float, y: float, font: str, color: str) -> None:
        self._draw.text((round(x), round(y)), text, fill=color, font=self._font(font), anchor="ls")

    def stroke_line(
        self, x1: float, y1: float, x2: float, y2: float, color: str, width: int
    ) -> None:
        self._draw.line(
            [(round(x1), round(y1)), (round(x2), round(y2))], fill=color, width=width
        )

    def draw_bitmap(
        self, bitmap: IconBitmap, x: float, y: float, width: int, height: int
    ) -> None:
        icon = Image.frombytes("RGBA", (bitmap.width, bitmap.height), bitmap.pixels)
        if icon.size != (width, height):
            icon = icon.resize((width, height), Image.Resampling.LANCZOS)
        self.image.paste(icon, (round(x), round(y)), icon)

    def encode(self, image_format: ImageFormat, quality: int) -> bytes:
        buf = io.BytesIO()
        if image_format == ImageFormat.JPEG:
            self.image.save(buf, format="JPEG", quality=quality)
        else:
            self.image.save(buf, format="PNG")
        return buf.getvalue()
