from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings pulled from environment variables."""

    # API Configuration
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, description="API port")
    debug: bool = Field(default=False, description="Enable debug mode")

    # Security Configuration
    allowed_origins: str = Field(default="http://localhost:3000,http://localhost:5173", description="CORS allowed origins")

    @property
    def cors_origins(self) -> List[str]:
        """Allowed origins as a list."""
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Logging format (e.g., plain, json)")

    # Galaxy Generation Configuration
    default_seed: int = Field(default=1111111111, description="Seed used when a request has none")
    default_radius: float = Field(default=500.0, description="Default galaxy radius in light years")
    default_system_count: int = Field(default=400, description="Default number of star systems")
    default_anomaly_count: int = Field(default=25, description="Default number of anomalies")
    max_system_count: int = Field(default=5000, description="Max allowed star systems per request")
    max_anomaly_count: int = Field(default=1000, description="Max allowed anomalies per request")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


# Instantiate singleton settings object
settings = Settings()
