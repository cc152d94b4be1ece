"""Weather data pipeline: grid lookup, forecast periods, then active alerts.

  points/{lat},{lon}              -> properties.forecast (forecast URL)
  <forecast URL>                  -> properties.periods[]
  alerts/active?point={lat},{lon} -> features[]
"""

import logging

from forecast_builder.ingest.fetcher import RetryingFetcher
from forecast_builder.ingest.shapes import (
    ShapeCheck,
    validate_alerts,
    validate_forecast,
    validate_grid,
)
from forecast_builder.models.errors import FailureKind, PipelineFailure, Stage
from forecast_builder.models.forecast import (
    Alert,
    Coordinate,
    ForecastPeriod,
    ForecastSummary,
    GridReference,
)

logger = logging.getLogger(__name__)

NWS_BASE_URL = "https://api.weather.gov"


class WeatherDataPipeline:
    def __init__(
        self,
        fetcher: RetryingFetcher,
        base_url: str = NWS_BASE_URL,
        alerts_required: bool = True,
    ):
        self.fetcher = fetcher
        self.base_url = base_url.rstrip("/")
        self.alerts_required = alerts_required

    def grid_url(self, coordinate: Coordinate) -> str:
        return f"{self.base_url}/points/{coordinate.lat},{coordinate.lon}"

    def alerts_url(self, coordinate: Coordinate) -> str:
        return f"{self.base_url}/alerts/active?point={coordinate.lat},{coordinate.lon}"

    def fetch(self, coordinate: Coordinate) -> ForecastSummary | PipelineFailure:
        """Run the three stages in order, stopping at the first failure."""
        grid = self.resolve_grid(coordinate)
        if isinstance(grid, PipelineFailure):
            return grid

        forecast = self.fetch_forecast(grid)
        if isinstance(forecast, PipelineFailure):
            return forecast
        periods, generated_at = forecast

        alerts = self.fetch_alerts(coordinate)
        if isinstance(alerts, PipelineFailure):
            if self.alerts_required:
                return alerts
            logger.warning(
                "Alerts unavailable for %s (%s), rendering without alerts",
                coordinate, alerts.detail,
            )
            alerts = []

        return ForecastSummary(
            periods=periods, alerts=alerts, generated_at=generated_at
        )

    def resolve_grid(self, coordinate: Coordinate) -> GridReference | PipelineFailure:
        url = self.grid_url(coordinate)
        logger.debug("Grid URL: %s", url)
        body = self.fetcher.get(url)
        if body is None:
            return _network_failure(Stage.GRID, url)

        check = validate_grid(body)
        if not check:
            return _shape_failure(check, url)
        return GridReference(forecast_url=body["properties"]["forecast"])

    def fetch_forecast(
        self, grid: GridReference
    ) -> tuple[list[ForecastPeriod], str] | PipelineFailure:
        url = grid.forecast_url
        logger.debug("Forecast URL: %s", url)
        body = self.fetcher.get(url)
        if body is None:
            return _network_failure(Stage.FORECAST, url)

        check = validate_forecast(body)
        if not check:
            return _shape_failure(check, url)

        props = body["properties"]
        generated_at = props.get("generatedAt", "")
        logger.debug("Forecast data generated at: %s", generated_at)
        return [_parse_period(p) for p in props["periods"]], generated_at

    def fetch_alerts(self, coordinate: Coordinate) -> list[Alert] | PipelineFailure:
        url = self.alerts_url(coordinate)
        logger.debug("Alerts URL: %s", url)
        body = self.fetcher.get(url)
        if body is None:
            return _network_failure(Stage.ALERTS, url)

        check = validate_alerts(body)
        if not check:
            return _shape_failure(check, url)

        alerts = [
            alert
            for feature in body["features"]
            if (alert := _parse_alert(feature)) is not None
        ]
        logger.debug("%d active alert(s) for %s", len(alerts), coordinate)
        return alerts


def _network_failure(stage: Stage, url: str) -> PipelineFailure:
    logger.warning("%s stage: no response from %s", stage.value, url)
    return PipelineFailure(
        stage=stage, kind=FailureKind.NETWORK, detail="no response", url=url
    )


def _shape_failure(check: ShapeCheck, url: str) -> PipelineFailure:
    logger.warning("%s stage: malformed response from %s: %s", check.stage.value, url, check.reason)
    return PipelineFailure(
        stage=check.stage, kind=FailureKind.SHAPE, detail=check.reason, url=url
    )


def _parse_period(p: dict) -> ForecastPeriod:
    return ForecastPeriod(
        number=int(p["number"]),
        name=p.get("name", ""),
        start_time=p.get("startTime", ""),
        end_time=p.get("endTime", ""),
        is_daytime=bool(p.get("isDaytime", False)),
        temperature=int(p.get("temperature", 0)),
        temperature_unit=p.get("temperatureUnit", "F"),
        wind_speed=p.get("windSpeed") or "",
        wind_direction=p.get("windDirection") or "",
        icon=p.get("icon") or "",
        short_forecast=p.get("shortForecast") or "",
        detailed_forecast=p.get("detailedForecast") or "",
    )


def _parse_alert(feature: dict) -> Alert | None:
    props = feature.get("properties") if isinstance(feature, dict) else None
    if not isinstance(props, dict):
        return None
    return Alert(
        message_type=props.get("messageType") or "",
        status=props.get("status") or "",
        severity=props.get("severity") or "",
        event=props.get("event") or "",
        headline=_alert_headline(props),
    )


def _alert_headline(props: dict) -> str:
    # NWSheadline is a list of strings; only the first is shown
    params = props.get("parameters")
    if isinstance(params, dict):
        headlines = params.get("NWSheadline")
        if isinstance(headlines, list) and headlines and isinstance(headlines[0], str):
            return headlines[0]
        if isinstance(headlines, str) and headlines:
            return headlines
    return props.get("headline") or props.get("event") or ""
