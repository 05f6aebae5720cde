"""Application settings and per-run scan options."""

import os
import re
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..common.constants import DEFAULT_CHUNK_SIZE
from ..common.exceptions import ConfigError
from ..detector.models import DigestAlgorithm


class Settings(BaseSettings):
    """Application configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LOCAL_DEDUP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Detection settings
    algorithm: DigestAlgorithm = Field(
        default=DigestAlgorithm.SHA256,
        description="Digest algorithm (sha256 or xxh64)",
    )
    workers: Optional[int] = Field(
        default=None,
        ge=1,
        description="Hashing worker threads (default: CPU count)",
    )
    chunk_size: int = Field(
        default=DEFAULT_CHUNK_SIZE,
        gt=0,
        description="Bytes read per call while hashing",
    )
    strict: bool = Field(
        default=False,
        description="Abort the run on the first unreadable file",
    )

    # Logging
    log_level: str = Field(
        default="WARNING",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    log_file: Optional[Path] = Field(
        default=None,
        description="Optional log file path",
    )


class ScanOptions(BaseModel):
    """Configuration of a single duplicate scan."""

    model_config = ConfigDict(frozen=True)

    root: Path = Path("./")
    recursive: bool = False
    exclude_dots: bool = False
    name_filter: Optional[re.Pattern] = None
    follow_symlinks: bool = False
    algorithm: DigestAlgorithm = DigestAlgorithm.SHA256
    min_size: Optional[int] = Field(default=None, ge=0)
    max_size: Optional[int] = Field(default=None, ge=0)
    workers: int = Field(default_factory=lambda: os.cpu_count() or 1, ge=1)
    strict: bool = False
    chunk_size: int = Field(default=DEFAULT_CHUNK_SIZE, gt=0)

    @model_validator(mode="after")
    def _check_size_bounds(self) -> "ScanOptions":
        if (
            self.min_size is not None
            and self.max_size is not None
            and self.min_size > self.max_size
        ):
            raise ValueError(
                f"min_size ({self.min_size}) is larger than max_size ({self.max_size})"
            )
        return self

    @classmethod
    def build(cls, settings: Optional["Settings"] = None, **overrides: object) -> "ScanOptions":
        """Build options from settings defaults and explicit overrides.

        Overrides set to None fall back to the settings value (or the model
        default when settings have none).

        Raises:
            ConfigError: If the resulting options are invalid
        """
        settings = settings or get_settings()
        values: dict[str, object] = {
            "algorithm": settings.algorithm,
            "chunk_size": settings.chunk_size,
            "strict": settings.strict,
        }
        if settings.workers is not None:
            values["workers"] = settings.workers
        values.update({k: v for k, v in overrides.items() if v is not None})

        try:
            return cls(**values)
        except ValidationError as e:
            messages = "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or 'options'}: {err['msg']}"
                for err in e.errors()
            )
            raise ConfigError(f"Invalid scan options: {messages}") from e


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get or create global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset global settings instance."""
    global _settings
    _settings = None
