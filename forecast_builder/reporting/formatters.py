"""Output formatters for build summaries."""

import json
from dataclasses import asdict

from forecast_builder.models.reporting import BuildSummary


def format_summary_text(s: BuildSummary) -> str:
    """Plain text summary for logging."""
    lines = [
        f"=== Build Complete | Run {s.run_id[:8]} ===",
        f"Locations: {s.locations_attempted} attempted, "
        f"{s.locations_succeeded} succeeded, {s.locations_failed} failed",
    ]
    for r in s.results:
        if r.succeeded:
            lines.append(f"  OK   {r.location} -> {r.file_name} ({r.image_bytes} bytes)")
        else:
            lines.append(f"  FAIL {r.location}: {r.error}")
    if s.errors:
        lines.append(f"Errors: {len(s.errors)}")
    lines.append(f"Duration: {s.duration_seconds:.1f}s")
    return "\n".join(lines)


def format_summary_json(s: BuildSummary) -> str:
    """JSON summary for programmatic consumption."""
    return json.dumps(asdict(s), indent=2)
