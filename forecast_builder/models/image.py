"""Bitmap and encoded image models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class IconBitmap:
    width: int
    height: int
    pixels: bytes  # RGBA, row-major, 4 bytes per pixel

    def __post_init__(self) -> None:
        expected = self.width * self.height * 4
        if len(self.pixels) != expected:
            raise ValueError(
                f"pixel buffer is {len(self.pixels)} bytes, expected {expected}"
            )


@dataclass(frozen=True)
class RenderedImage:
    data: bytes
    image_type: str  # "jpg" or "png"

    @property
    def size_bytes(self) -> int:
        return len(self.data)
