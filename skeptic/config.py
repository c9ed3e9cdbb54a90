"""Settings for emitting and running doc tests.

Loaded from ``SKEPTIC_*`` environment variables or a ``.env`` file. The
extraction and composition functions never read these settings; callers
pass what they need explicitly.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """skeptic settings loaded from the environment."""

    model_config = SettingsConfigDict(
        env_prefix="SKEPTIC_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    language: str = Field(
        default="rust",
        description="Info string token marking code samples.",
    )
    template_suffix: str = Field(
        default=".skt.md",
        description="Suffix appended to a document path to find its named templates.",
    )
    strip_hidden_lines: bool = Field(
        default=True,
        description="Remove the '# ' prefix of hidden code lines before composing.",
    )

    out_dir: Path = Field(
        default=Path("target/skeptic"),
        description="Directory receiving composed test sources and the manifest.",
    )
    source_suffix: str = Field(
        default=".rs",
        description="File suffix of emitted test sources.",
    )

    build_command: str = Field(
        default="rustc --edition=2021 -o {binary} {source}",
        description="Command building one test; {source} and {binary} are substituted.",
    )
    run_command: Optional[str] = Field(
        default="{binary}",
        description="Command running one built test, or empty to only build.",
    )
    timeout: float = Field(
        default=120.0,
        description="Seconds allowed for each build or run command.",
    )

    log_level: str = Field(
        default="WARNING",
        description="Logging level: DEBUG, INFO, WARNING, ERROR.",
    )

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Normalize log level to uppercase."""
        return v.upper()

    @field_validator("timeout")
    @classmethod
    def check_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"timeout must be positive, got {v}")
        return v

    def configure_logging(self) -> None:
        """Configure global logging based on settings."""
        level = getattr(logging, self.log_level, logging.WARNING)

        logging.basicConfig(
            format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
            level=level,
        )
        logging.getLogger("skeptic").setLevel(level)
        logger.debug("Logging configured at level %s", self.log_level)


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create the global Settings instance.

    Returns:
        The singleton Settings instance.
    """
    global _settings
    if _settings is None:
        _settings = Settings()
        _settings.configure_logging()
    return _settings
