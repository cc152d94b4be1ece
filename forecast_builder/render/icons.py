"""Forecast icon bitmaps, cached as base64 PNG payloads.

Icon artwork for a given URL never changes, so entries are stored with an
expiration years in the future. A missing icon is not an error: resolve()
returns None and the column is drawn without one.
"""

import base64
import io
import logging
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import httpx
from PIL import Image, UnidentifiedImageError

from forecast_builder.models.common import expiration_ms
from forecast_builder.models.errors import CacheWriteFailure, IconUnavailable
from forecast_builder.models.image import IconBitmap
from forecast_builder.storage.kv_cache import ByteCache

logger = logging.getLogger(__name__)

DEFAULT_ICON_SIZE = 150
ICON_EXPIRATION_DAYS = 3650


def normalize_icon_url(url: str, size: int = DEFAULT_ICON_SIZE) -> str:
    """Rewrite the ``size`` query parameter to a fixed pixel size.

    https://api.weather.gov/icons/land/day/few?size=medium
      -> https://api.weather.gov/icons/land/day/few?size=150
    """
    parts = urlsplit(url)
    query = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if k != "size"]
    query.append(("size", str(size)))
    return urlunsplit(parts._replace(query=urlencode(query, safe=",")))


def encode_bitmap(bitmap: IconBitmap) -> dict:
    """Encode a bitmap as a JSON-safe cache payload (base64 PNG)."""
    image = Image.frombytes("RGBA", (bitmap.width, bitmap.height), bitmap.pixels)
    buf = io.BytesIO()
    image.save(buf, format="PNG")
    return {
        "dataStr": base64.b64encode(buf.getvalue()).decode("ascii"),
        "width": bitmap.width,
        "height": bitmap.height,
    }


def decode_bitmap(payload: dict) -> IconBitmap:
    """Decode a cache payload produced by encode_bitmap.

    Raises IconUnavailable if the payload is not a readable image.
    """
    try:
        data = base64.b64decode(payload["dataStr"], validate=True)
    except (KeyError, TypeError, ValueError) as e:
        raise IconUnavailable(f"bad cache payload: {e}") from e
    return decode_image_bytes(data)


def decode_image_bytes(data: bytes) -> IconBitmap:
    try:
        with Image.open(io.BytesIO(data)) as image:
            rgba = image.convert("RGBA")
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
        raise IconUnavailable(f"undecodable image: {e}") from e
    return IconBitmap(width=rgba.width, height=rgba.height, pixels=rgba.tobytes())


class IconCache:
    def __init__(
        self,
        cache: ByteCache,
        user_agent: str,
        timeout: float = 5.0,
        icon_size: int = DEFAULT_ICON_SIZE,
        expiration_days: int = ICON_EXPIRATION_DAYS,
    ):
        self.cache = cache
        self.user_agent = user_agent
        self.timeout = timeout
        self.icon_size = icon_size
        self.expiration_days = expiration_days

    def resolve(self, icon_id: str) -> IconBitmap | None:
        if not icon_id:
            return None
        key = normalize_icon_url(icon_id, self.icon_size)

        cached = self._lookup(key)
        if cached is not None:
            try:
                return decode_bitmap(cached)
            except IconUnavailable as e:
                logger.warning("Cached icon %s unreadable, refetching: %s", key, e)

        try:
            bitmap = self._download(key)
        except IconUnavailable as e:
            logger.warning("No icon for %s: %s", key, e)
            return None

        try:
            self._store(key, bitmap)
        except CacheWriteFailure as e:
            logger.warning("Icon %s not cached: %s", key, e)
        return bitmap

    def _lookup(self, key: str) -> dict | None:
        try:
            return self.cache.get(key)
        except Exception as e:
            # an unreadable cache behaves like a miss
            logger.warning("Icon cache read failed for %s: %s", key, e)
            return None

    def _download(self, url: str) -> IconBitmap:
        try:
            resp = httpx.get(url, headers={"User-Agent": self.user_agent}, timeout=self.timeout)
            resp.raise_for_status()
        except httpx.HTTPError as e:
            raise IconUnavailable(f"GET {url}: {e}") from e
        logger.debug("Fetched icon %s (%d bytes)", url, len(resp.content))
        return decode_image_bytes(resp.content)

    def _store(self, key: str, bitmap: IconBitmap) -> None:
        try:
            payload = encode_bitmap(bitmap)
            self.cache.set(key, payload, expiration_ms(self.expiration_days))
        except Exception as e:
            # the cache is an external collaborator; any error it raises is non-fatal
            raise CacheWriteFailure(str(e)) from e
