"""Error taxonomy and the pipeline failure result.

The pipeline reports failures as PipelineFailure values rather than raising.
NetworkFailure, DataShapeError and NoPeriodsAvailable exist for library
callers that prefer exceptions: PipelineFailure.as_error() returns the
matching instance, ready to raise.
"""

from dataclasses import dataclass
from enum import StrEnum


class ForecastBuilderError(Exception):
    """Base class for all forecast builder errors."""


class ConfigurationError(ForecastBuilderError):
    """Raised before any request when required configuration is missing."""


class NetworkFailure(ForecastBuilderError):
    def __init__(self, url: str, attempts: int):
        super().__init__(f"GET {url} failed after {attempts} attempt(s)")
        self.url = url
        self.attempts = attempts


class DataShapeError(ForecastBuilderError):
    def __init__(self, stage: str, detail: str = ""):
        super().__init__(f"{stage}: {detail}" if detail else stage)
        self.stage = stage
        self.detail = detail


class NoPeriodsAvailable(ForecastBuilderError):
    pass


class IconUnavailable(ForecastBuilderError):
    pass


class CacheWriteFailure(ForecastBuilderError):
    pass


class Stage(StrEnum):
    GRID = "grid"
    FORECAST = "forecast"
    ALERTS = "alerts"
    RENDER = "render"


class FailureKind(StrEnum):
    NETWORK = "network"
    SHAPE = "shape"
    NO_PERIODS = "no_periods"


@dataclass(frozen=True)
class PipelineFailure:
    stage: Stage
    kind: FailureKind
    detail: str
    url: str = ""

    def as_error(self) -> ForecastBuilderError:
        if self.kind == FailureKind.NETWORK:
            return NetworkFailure(self.url, attempts=2)
        if self.kind == FailureKind.NO_PERIODS:
            return NoPeriodsAvailable(self.detail)
        return DataShapeError(self.stage.value, self.detail)

    def __str__(self) -> str:
        return f"{self.stage.value} {self.kind.value}: {self.detail}"
