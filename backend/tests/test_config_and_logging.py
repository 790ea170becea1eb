"""Tests for settings, region selection and logging setup."""
import logging
import sys

from app.core.config import Settings, get_settings
from app.core.logging import ContextLogger, configure_logging
from app.core.regions import EC2_REGIONS, regions_for


def test_settings_defaults(monkeypatch):
    for var in ("CPU_THRESHOLD", "SCAN_REGIONS", "CHECK_MAX_WORKERS", "MOCK_CACHE", "LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    settings = Settings(_env_file=None)
    assert settings.cpu_threshold == 90.0
    assert settings.check_max_workers == 8
    assert settings.mock_cache is False
    assert settings.scan_regions_list == []


def test_settings_read_fresh_from_env(monkeypatch):
    monkeypatch.setenv("CPU_THRESHOLD", "75.5")
    monkeypatch.setenv("SCAN_REGIONS", " us-east-1, eu-west-1 ,,")
    settings = get_settings()
    assert settings.cpu_threshold == 75.5
    assert settings.scan_regions_list == ["us-east-1", "eu-west-1"]

    monkeypatch.setenv("CPU_THRESHOLD", "60")
    assert get_settings().cpu_threshold == 60.0


def test_regions_for_uses_configured_subset():
    settings = Settings(scan_regions="eu-west-1,us-east-1,eu-west-1")
    assert regions_for(settings) == ["eu-west-1", "us-east-1"]


def test_regions_for_defaults_to_catalogue():
    settings = Settings(scan_regions="")
    regions = regions_for(settings)
    assert regions == list(EC2_REGIONS)
    assert "us-east-1" in regions


def test_configure_logging_installs_single_stdout_handler(monkeypatch):
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    monkeypatch.setenv("LOG_LEVEL", "debug")
    try:
        configure_logging()
        configure_logging()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert root.handlers[0].stream is sys.stdout
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)


def test_context_logger_injects_fields(caplog):
    log = ContextLogger("app.tests", region="us-east-1")
    with caplog.at_level(logging.DEBUG, logger="app.tests"):
        log.debug("evaluated", resource="i-1")
    record = caplog.records[-1]
    assert record.region == "us-east-1"
    assert record.resource == "i-1"
    assert record.getMessage() == "evaluated"
