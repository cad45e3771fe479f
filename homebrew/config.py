import os
from dataclasses import dataclass, field
from functools import lru_cache

from homebrew.database import DatabaseConfig


@dataclass(frozen=True)
class ServiceConfig:
    """Settings captured once at startup and shared read-only by every request."""

    api_key: str = field(repr=False)
    database: DatabaseConfig = field(repr=False)
    port: int = 8080
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, prefix: str = "HOMEBREW") -> "ServiceConfig":
        api_key = os.getenv(f"{prefix}_API_KEY")
        if not api_key:
            raise RuntimeError(f"${prefix}_API_KEY is not set")
        return cls(
            api_key=api_key,
            database=DatabaseConfig.from_env(prefix=f"{prefix}_DB"),
            port=int(os.getenv(f"{prefix}_PORT", "8080")),
            log_level=os.getenv(f"{prefix}_LOG_LEVEL", "INFO").upper(),
        )


@lru_cache(maxsize=1)
def get_settings() -> ServiceConfig:
    return ServiceConfig.from_env()
