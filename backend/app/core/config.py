from __future__ import annotations

from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_env: str = "development"
    app_version: str = "1.0.0"

    # Regions to evaluate, empty means the full default catalogue
    scan_regions: str = ""

    # Threshold check
    cpu_threshold: float = 90.0
    check_max_workers: int = 8

    # Collected API cache
    mock_cache: bool = False
    cache_file: str = ""

    # Logging
    log_level: str = "INFO"

    @property
    def scan_regions_list(self) -> List[str]:
        return [r.strip() for r in self.scan_regions.split(",") if r.strip()]


def get_settings() -> Settings:
    """Return settings, reading env variables fresh (no module-level cache).

    Callers that tweak os.environ between runs (tests, the run_check script)
    see the change on the next call.
    """
    return Settings()
