"""Tests for CLI commands."""

from pathlib import Path

import respx
import yaml

from forecast_builder.cli import main
from forecast_builder.models.common import epoch_ms, utc_now
from forecast_builder.storage.kv_cache import SqliteCache
from forecast_builder.tests.conftest import TEST_BASE_URL, mock_weather_service


def _write_config(tmp_path: Path, **service) -> Path:
    data = {
        "service": {"base_url": TEST_BASE_URL, "retry_delay_seconds": 0.0, **service},
        "locations": [
            {
                "file_name": "onset-forecast.png",
                "location": "Onset, MA",
                "lat": "41.85",
                "lon": "-70.65",
            }
        ],
        "layout": {"image_format": "png"},
    }
    path = tmp_path / "forecast.yaml"
    with open(path, "w") as f:
        yaml.dump(data, f)
    return path


class TestCLI:
    def test_no_command_returns_1(self, capsys):
        assert main([]) == 1

    def test_config_show(self, tmp_path: Path, capsys):
        config_path = _write_config(tmp_path, user_agent="me@example.com")
        result = main(["--config", str(config_path), "config", "show"])
        assert result == 0
        captured = capsys.readouterr()
        assert TEST_BASE_URL in captured.out
        assert "Onset, MA" in captured.out

    def test_config_get(self, tmp_path: Path, capsys):
        config_path = tmp_path / "empty.yaml"
        config_path.write_text("")
        result = main(["--config", str(config_path), "config", "get", "layout.alert_width"])
        assert result == 0
        assert capsys.readouterr().out.strip() == "1400"

    def test_config_get_unknown_key(self, tmp_path: Path, capsys):
        config_path = tmp_path / "empty.yaml"
        config_path.write_text("")
        result = main(["--config", str(config_path), "config", "get", "nope.nothing"])
        assert result == 1
        assert "Error" in capsys.readouterr().out

    def test_build_without_identity(self, tmp_path: Path, capsys, monkeypatch):
        monkeypatch.delenv("USER_AGENT", raising=False)
        config_path = _write_config(tmp_path)
        result = main([
            "--config", str(config_path),
            "--cache-db", str(tmp_path / "cache.db"),
            "--output-dir", str(tmp_path / "out"),
            "build",
        ])
        assert result == 1
        assert "USER_AGENT" in capsys.readouterr().out
        assert not (tmp_path / "out").exists()

    @respx.mock
    def test_build_writes_image(
        self, tmp_path: Path, capsys, points_json, forecast_json, alerts_empty_json
    ):
        mock_weather_service(points_json, forecast_json, alerts_empty_json)
        config_path = _write_config(tmp_path, user_agent="me@example.com")
        out_dir = tmp_path / "out"

        result = main([
            "--config", str(config_path),
            "--cache-db", str(tmp_path / "cache.db"),
            "--output-dir", str(out_dir),
            "build",
        ])

        assert result == 0
        assert "Built 1/1" in capsys.readouterr().out
        assert (out_dir / "onset-forecast.png").read_bytes().startswith(b"\x89PNG")

        cache = SqliteCache(tmp_path / "cache.db")
        assert len(cache) == 3  # one entry per distinct icon
        cache.close()

    @respx.mock
    def test_build_failure_exit_code(self, tmp_path: Path, capsys, forecast_json, alerts_empty_json):
        mock_weather_service({"properties": {}}, forecast_json, alerts_empty_json)
        config_path = _write_config(tmp_path, user_agent="me@example.com")

        result = main([
            "--config", str(config_path),
            "--cache-db", str(tmp_path / "cache.db"),
            "--output-dir", str(tmp_path / "out"),
            "build",
        ])

        assert result == 1
        assert "Built 0/1" in capsys.readouterr().out

    def test_cache_purge(self, tmp_path: Path, capsys):
        db_path = tmp_path / "cache.db"
        cache = SqliteCache(db_path)
        cache.set("old", {"v": 1}, epoch_ms(utc_now()) - 1000)
        cache.set("new", {"v": 2}, epoch_ms(utc_now()) + 60_000)
        cache.close()
        config_path = tmp_path / "empty.yaml"
        config_path.write_text("")

        result = main(["--config", str(config_path), "--cache-db", str(db_path), "cache", "purge"])

        assert result == 0
        assert "Removed 1 expired entries, 1 remaining" in capsys.readouterr().out
