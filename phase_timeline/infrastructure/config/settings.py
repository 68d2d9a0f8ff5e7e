from functools import lru_cache

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App
    app_name: str = "Phase Timeline"
    app_version: str = "1.0.0"
    debug: bool = False

    # CORS - comma-separated list of allowed origins
    allowed_origins: str = "http://localhost:3000,http://localhost:8080"

    # Server-Timing
    server_timing_enabled: bool = True  # Emit Server-Timing on every response
    log_request_timelines: bool = False  # Log each request's summary at DEBUG
    timing_allow_origin: str = "*"  # Timing-Allow-Origin header value
    cross_origin_isolation: bool = True  # COOP/COEP/CORP for high-res timers

    # Timelines
    display_refresh_interval: float = 0.05  # Seconds between live view pushes
    max_timeline_runs: int = 100
    max_phase_name_length: int = 100

    # OpenTelemetry Distributed Tracing
    telemetry_enabled: bool = False  # Enable/disable distributed tracing
    telemetry_exporter: str = "console"  # Options: "console", "otlp", "none"
    telemetry_otlp_endpoint: str | None = None  # e.g., "http://localhost:4317"
    telemetry_sample_rate: float = 1.0  # Sampling rate (0.0-1.0, 1.0 = 100%)
    telemetry_environment: str = "development"  # deployment environment tag

    @model_validator(mode="after")
    def validate_timeline_config(self) -> "Settings":
        """Validate timeline and telemetry configuration"""
        if self.display_refresh_interval <= 0:
            raise ValueError("DISPLAY_REFRESH_INTERVAL must be greater than 0")
        if self.max_timeline_runs < 1:
            raise ValueError("MAX_TIMELINE_RUNS must be at least 1")
        if self.max_phase_name_length < 1:
            raise ValueError("MAX_PHASE_NAME_LENGTH must be at least 1")
        if not 0.0 <= self.telemetry_sample_rate <= 1.0:
            raise ValueError("TELEMETRY_SAMPLE_RATE must be between 0.0 and 1.0")

        if self.telemetry_exporter not in ("console", "otlp", "none"):
            raise ValueError(
                f"Invalid telemetry_exporter '{self.telemetry_exporter}'. "
                f"Must be one of: 'console', 'otlp', 'none'"
            )
        if self.telemetry_exporter == "otlp" and not self.telemetry_otlp_endpoint:
            raise ValueError(
                "telemetry_otlp_endpoint is required when telemetry_exporter is 'otlp'. "
                "Set TELEMETRY_OTLP_ENDPOINT environment variable or update .env file."
            )
        return self

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="allow", case_sensitive=False
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
