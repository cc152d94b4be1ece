"""Structural checks on the three weather.gov response shapes.

Pure functions: each takes the parsed JSON body (or None) and returns a
ShapeCheck describing whether the fields the next step depends on exist.
"""

from dataclasses import dataclass
from typing import Any

from forecast_builder.models.errors import Stage


@dataclass(frozen=True)
class ShapeCheck:
    stage: Stage
    ok: bool
    reason: str = ""

    def __bool__(self) -> bool:
        return self.ok


def _ok(stage: Stage) -> ShapeCheck:
    return ShapeCheck(stage=stage, ok=True)


def _fail(stage: Stage, reason: str) -> ShapeCheck:
    return ShapeCheck(stage=stage, ok=False, reason=reason)


def _properties(body: Any) -> dict | None:
    if not isinstance(body, dict):
        return None
    props = body.get("properties")
    return props if isinstance(props, dict) else None


def validate_grid(body: Any) -> ShapeCheck:
    props = _properties(body)
    if props is None:
        return _fail(Stage.GRID, "missing properties")
    forecast = props.get("forecast")
    if not isinstance(forecast, str) or not forecast:
        return _fail(Stage.GRID, "missing properties.forecast")
    return _ok(Stage.GRID)


def validate_forecast(body: Any) -> ShapeCheck:
    props = _properties(body)
    if props is None:
        return _fail(Stage.FORECAST, "missing properties")
    periods = props.get("periods")
    if not isinstance(periods, list) or not periods:
        return _fail(Stage.FORECAST, "missing properties.periods")

    previous: int | None = None
    for i, period in enumerate(periods):
        if not isinstance(period, dict):
            return _fail(Stage.FORECAST, f"period {i} is not an object")
        number = period.get("number")
        # bool is an int subclass; reject it explicitly
        if not isinstance(number, int) or isinstance(number, bool):
            return _fail(Stage.FORECAST, f"period {i} has no number")
        if previous is not None and number <= previous:
            return _fail(
                Stage.FORECAST,
                f"period numbers not increasing at index {i} ({previous} -> {number})",
            )
        previous = number
        if not isinstance(period.get("name"), str):
            return _fail(Stage.FORECAST, f"period {i} has no name")
        temp = period.get("temperature")
        if not isinstance(temp, (int, float)) or isinstance(temp, bool):
            return _fail(Stage.FORECAST, f"period {i} has no temperature")
    return _ok(Stage.FORECAST)


def validate_alerts(body: Any) -> ShapeCheck:
    if not isinstance(body, dict):
        return _fail(Stage.ALERTS, "response is not an object")
    features = body.get("features")
    if not isinstance(features, list):
        return _fail(Stage.ALERTS, "missing features")
    return _ok(Stage.ALERTS)
