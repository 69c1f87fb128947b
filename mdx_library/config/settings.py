"""Settings for mdx builds and the mdxd daemon.

Contract:
- Inputs: Environment variables, YAML files
- Outputs: Validated settings objects
- Side Effects: None (read-only)
"""

from pydantic import Field
from pydantic import field_validator
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict


class BuildSettings(BaseSettings):
    """Configuration for builds and the daemon.

    Attributes:
        environment: Execution environment; "development" turns on development
            mode in newly constructed compilers
        log_level: Logging level (default: info)
        default_group: Cache group used when a caller names none
        host: Daemon listen address (default: 127.0.0.1)
        port: Daemon listen port (default: 8430)
        cors_origins: Origins allowed to call the daemon

    Example:
        >>> settings = BuildSettings()
        >>> assert settings.port == 8430
    """

    model_config = SettingsConfigDict(
        env_prefix="MDXBUILD_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    environment: str = "production"
    log_level: str = "info"
    default_group: str = "default"

    host: str = "127.0.0.1"
    port: int = Field(default=8430, ge=1, le=65535)
    cors_origins: list[str] = Field(default_factory=lambda: ["http://localhost:5173"])

    @field_validator("environment")
    @classmethod
    def normalize_environment(cls, v: str) -> str:
        return v.strip().lower()

    @property
    def is_development(self) -> bool:
        return self.environment == "development"
