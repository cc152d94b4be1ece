"""Build run reporting models."""

from dataclasses import dataclass, field


@dataclass
class LocationResult:
    location: str
    file_name: str
    succeeded: bool
    image_bytes: int = 0
    error: str = ""


@dataclass
class BuildSummary:
    run_id: str
    locations_attempted: int = 0
    locations_succeeded: int = 0
    locations_failed: int = 0
    results: list[LocationResult] = field(default_factory=list)
    duration_seconds: float = 0.0
    errors: list[str] = field(default_factory=list)

    @property
    def all_succeeded(self) -> bool:
        return self.locations_failed == 0 and not self.errors
