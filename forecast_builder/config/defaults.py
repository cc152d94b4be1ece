"""Default locations used when the config file lists none."""

from forecast_builder.config.schema import LocationConfig

DEFAULT_LOCATIONS: list[LocationConfig] = [
    LocationConfig(
        file_name="onset-forecast.jpg",
        location="Onset, MA",
        lat="41.85",
        lon="-70.65",
        time_zone="America/New_York",
    ),
]
