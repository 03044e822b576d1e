"""
tests/test_config.py — YAML Configuration Loader
================================================
"""

from __future__ import annotations

from datetime import timedelta

import pytest

from gavel.config import GavelConfig, load_config


class TestLoadConfig:
    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="config.yaml.example"):
            load_config(tmp_path / "config.yaml")

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("", encoding="utf-8")
        assert load_config(path) == GavelConfig()

    def test_values_are_read(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "bot_name: Bailiff\n"
            "dashboard_port: 9000\n"
            "alert_interval_hours: 12\n"
            "kickoff_delay_seconds: 0\n"
            "auth_cache_ttl_seconds: 30\n"
            "ticket_cache_ttl_seconds: 45\n"
            "notes_view_limit: 5\n",
            encoding="utf-8",
        )
        cfg = load_config(path)
        assert cfg.bot_name == "Bailiff"
        assert cfg.dashboard_port == 9000
        assert cfg.alert_interval == timedelta(hours=12)
        assert cfg.kickoff_delay == timedelta(0)
        assert cfg.auth_cache_ttl_seconds == 30
        assert cfg.ticket_cache_ttl_seconds == 45
        assert cfg.notes_view_limit == 5

    @pytest.mark.parametrize("line", [
        "alert_interval_hours: 0",
        "kickoff_delay_seconds: -1",
        "auth_cache_ttl_seconds: 0",
        "ticket_cache_ttl_seconds: 0",
        "notes_view_limit: 0",
    ])
    def test_out_of_range(self, tmp_path, line):
        path = tmp_path / "config.yaml"
        path.write_text(line + "\n", encoding="utf-8")
        with pytest.raises(ValueError):
            load_config(path)

    def test_defaults(self):
        cfg = GavelConfig()
        assert cfg.alert_interval == timedelta(hours=24)
        assert cfg.kickoff_delay == timedelta(seconds=10)
