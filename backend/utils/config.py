"""
Merkle Whitelist Configuration Module.

Centralizes all configuration settings using Pydantic Settings.
Requires Python 3.11+.
"""

from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env file into os.environ at module import time
# This ensures nested BaseSettings classes can read the values
_env_file = Path(__file__).parent.parent / ".env"
if _env_file.exists():
    load_dotenv(_env_file)
else:
    # Try current working directory
    load_dotenv()


SUPPORTED_HASH_ALGORITHMS = ("sha256", "keccak256")


class MerkleSettings(BaseSettings):
    """Tree construction defaults."""

    model_config = SettingsConfigDict(env_prefix="MERKLE_")

    hash_algorithm: str = Field(
        default="keccak256",
        description="Digest used for leaves and internal nodes",
    )
    sorted_pairs: bool = Field(
        default=True,
        description="Sort leaves and pairs so roots are order independent",
    )
    parallel_threshold: int = Field(
        default=4096, ge=1, description="Minimum pairs in a layer before hashing in parallel"
    )
    max_workers: int = Field(default=4, ge=1, le=32, description="Parallel hashing workers")

    @field_validator("hash_algorithm", mode="before")
    @classmethod
    def parse_hash_algorithm(cls, v: str) -> str:
        """Normalize and check the hash algorithm name."""
        name = str(v).strip().lower().replace("-", "")
        if name not in SUPPORTED_HASH_ALGORITHMS:
            raise ValueError(
                f"hash_algorithm must be one of {', '.join(SUPPORTED_HASH_ALGORITHMS)}"
            )
        return name


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: str = Field(default="INFO")
    format: str = Field(default="json")  # "json" or "console"


class Settings(BaseSettings):
    """Main application settings aggregating all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application metadata
    app_name: str = Field(default="MerkleWhitelist")
    app_version: str = Field(default="0.1.0")
    environment: str = Field(default="development")

    # Sub-settings
    merkle: MerkleSettings = Field(default_factory=MerkleSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns singleton instance of Settings. Call
    ``get_settings.cache_clear()`` after changing the environment.
    """
    return Settings()

