# disaster_response/config.py
# ------------------------------------------------------------
# Central configuration using pydantic-settings.
#
# All values can be overridden via environment variables.
# ------------------------------------------------------------

from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    """
    Runtime configuration for the backend.
    """

    # --------------------------------------------------------
    # Infrastructure
    # --------------------------------------------------------
    redis_url: str = "redis://localhost:6379/0"

    # --------------------------------------------------------
    # CORS / Frontend integration
    # --------------------------------------------------------
    api_cors_origins: str = (
        "http://localhost:5173,"
        "http://localhost:3000"
    )

    # --------------------------------------------------------
    # Simulation toggles
    # --------------------------------------------------------
    generators_enabled: bool = True
    sensor_rate_sec: int = 30

    # --------------------------------------------------------
    # Alerting / retention
    # --------------------------------------------------------
    alert_dedup_window_sec: int = 300   # 5 minutes
    reading_buffer_max: int = 1000      # per sensor, oldest evicted first
    alert_list_max: int = 5000
    report_list_max: int = 5000
    update_stream_max: int = 500

    # --------------------------------------------------------
    # Logging
    # --------------------------------------------------------
    log_level: str = "INFO"
    log_format: str = "json"        # "json" or "console"

    # --------------------------------------------------------
    # Helpers
    # --------------------------------------------------------
    def cors_list(self) -> List[str]:
        """
        Parse comma-separated CORS origins into a clean list.
        """
        return [
            x.strip()
            for x in self.api_cors_origins.split(",")
            if x.strip()
        ]


# Singleton settings object
settings = Settings()
