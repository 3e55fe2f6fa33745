"""
Client configuration.
"""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Sign-on client settings."""

    model_config = SettingsConfigDict(
        env_prefix="IBMI_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Host settings
    host: str = "localhost"
    user_id: str = ""
    password: str = ""
    secure: bool = False
    port: Optional[int] = None

    # Connection settings
    connect_timeout: Optional[float] = 30.0
    read_timeout: Optional[float] = None
    write_timeout: Optional[float] = None
    max_frame_size: int = 1024 * 1024

    # Logging
    logging_level: str = "INFO"
    logging_on_file: bool = False
    logs_dir: str = "logs"


# Global settings instance
settings = Settings()
