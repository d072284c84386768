"""Configuration management using Pydantic settings."""
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Harness settings loaded from environment variables."""
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )
    
    # Service endpoints
    influxdb_host: str
    kapacitor_host: str
    request_timeout: int = 30
    
    # Database readiness polling
    poll_attempts: int = 10
    poll_interval_seconds: float = 1.0
    
    # Database setup defaults
    default_retention_policy: str = "autogen"
    default_duration: str = "1h"
    
    # Application
    log_level: str = "INFO"
    log_format: str = "json"
    
    @property
    def influxdb_url(self) -> str:
        """InfluxDB base URL without a trailing slash."""
        return self.influxdb_host.rstrip('/')
    
    @property
    def kapacitor_url(self) -> str:
        """Kapacitor base URL without a trailing slash."""
        return self.kapacitor_host.rstrip('/')


def get_settings() -> Settings:
    """Get harness settings instance."""
    return Settings()
