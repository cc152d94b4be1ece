"""Single-URL JSON GET with timeout and one retry."""

import logging
import time

import httpx

from forecast_builder.models.errors import ConfigurationError

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 2  # the first try plus exactly one retry
RETRYABLE_STATUS = (429, 500, 502, 503, 504)


class RetryingFetcher:
    """GETs a JSON document, retrying once on network or server failure.

    Never raises past ``get``: a request that cannot be completed returns
    None and is logged with its URL and attempt number.
    """

    def __init__(
        self,
        user_agent: str,
        timeout: float = 5.0,
        retry_delay: float = 0.5,
        track_timing: bool = False,
    ):
        if not user_agent or not user_agent.strip():
            raise ConfigurationError("a contact identity (User-Agent) is required")
        self.user_agent = user_agent.strip()
        self.timeout = timeout
        self.retry_delay = retry_delay
        self.track_timing = track_timing
        self.attempts = 0  # total attempts across all calls, for diagnostics

    def headers(self) -> dict[str, str]:
        return {"User-Agent": self.user_agent, "Accept": "application/geo+json"}

    def get(self, url: str, timeout: float | None = None) -> dict | None:
        timeout = self.timeout if timeout is None else timeout

        for attempt in range(1, MAX_ATTEMPTS + 1):
            self.attempts += 1
            started = time.monotonic()
            try:
                resp = httpx.get(url, headers=self.headers(), timeout=timeout)
            except httpx.RequestError as e:
                logger.warning(
                    "GET %s failed (attempt %d/%d): %s",
                    url, attempt, MAX_ATTEMPTS, e,
                )
                if attempt < MAX_ATTEMPTS:
                    self._pause()
                    continue
                logger.error("GET %s: retry failed, giving up", url)
                return None

            if self.track_timing:
                logger.info(
                    "GET %s took %.0fms", url, (time.monotonic() - started) * 1000
                )

            if resp.status_code in RETRYABLE_STATUS:
                logger.warning(
                    "GET %s returned %d (attempt %d/%d)",
                    url, resp.status_code, attempt, MAX_ATTEMPTS,
                )
                if attempt < MAX_ATTEMPTS:
                    self._pause()
                    continue
                logger.error("GET %s: retry failed, giving up", url)
                return None

            if resp.status_code >= 400:
                logger.warning("GET %s returned %d, not retrying", url, resp.status_code)
                return None

            try:
                body = resp.json()
            except ValueError as e:
                logger.warning("GET %s returned a non-JSON body: %s", url, e)
                return None

            if attempt > 1:
                logger.info("GET %s: retry succeeded on attempt %d", url, attempt)
            return body

        return None

    def _pause(self) -> None:
        if self.retry_delay > 0:
            time.sleep(self.retry_delay)
