"""
Carrier integration settings for parceltrack
"""

from pydantic_settings import BaseSettings
from pydantic import Field
from functools import lru_cache


class CarrierIntegrationSettings(BaseSettings):
    """Carrier integration configuration settings"""

    # Colissimo (La Poste) timeline API
    colissimo_api_key: str = Field(default="", env="COLISSIMO_API_KEY")
    colissimo_base_url: str = Field(
        default="https://ws.colissimo.fr/tracking-timeline-ws/rest/tracking",
        env="COLISSIMO_BASE_URL"
    )
    colissimo_timeout: float = Field(default=10.0, env="COLISSIMO_TIMEOUT")  # seconds

    # 17TRACK aggregator
    track17_api_key: str = Field(default="", env="TRACK17_API_KEY")
    track17_base_url: str = Field(default="https://api.17track.net/track/v2.2", env="TRACK17_BASE_URL")
    track17_timeout: float = Field(default=15.0, env="TRACK17_TIMEOUT")  # seconds

    # Simulator latency window (milliseconds)
    tracking_simulator_min_delay_ms: int = Field(default=100, env="TRACKING_SIMULATOR_MIN_DELAY_MS")
    tracking_simulator_max_delay_ms: int = Field(default=300, env="TRACKING_SIMULATOR_MAX_DELAY_MS")

    # Logging
    tracking_log_level: str = Field(default="INFO", env="TRACKING_LOG_LEVEL")

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"


@lru_cache()
def get_carrier_integration_settings() -> CarrierIntegrationSettings:
    """Get cached carrier integration settings instance"""
    return CarrierIntegrationSettings()
