"""Configuration for resource loaders."""

import logging
import os
from pathlib import Path

import dotenv
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

ENV_PREFIX = "UNIRES_"


class LoaderConfig(BaseModel):
    """Settings shared by loaders and the resources they create."""

    base_path: Path | None = Field(
        default=None, description="Ambient base for unqualified relative paths"
    )
    classpath_anchor: str | None = Field(
        default=None, description="Package that classpath: names resolve inside"
    )
    http_timeout: float = Field(default=30.0, gt=0)
    max_redirects: int = Field(default=5, ge=0)
    chunk_size: int = Field(default=8192, gt=0)
    http_headers: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_env(
        cls, env_file: Path | str | None = None, prefix: str = ENV_PREFIX
    ) -> "LoaderConfig":
        """Build a config from ``UNIRES_*`` environment variables.

        Args:
            env_file: Optional ``.env`` file loaded first; variables already
                set in the environment win
            prefix: Environment variable prefix

        Returns:
            The validated config
        """
        if env_file is not None:
            dotenv.load_dotenv(env_file)
            logger.debug("Loaded environment from %s", env_file)

        values = {}
        for field in ("base_path", "classpath_anchor", "http_timeout",
                      "max_redirects", "chunk_size"):
            value = os.environ.get(f"{prefix}{field.upper()}")
            if value:
                values[field] = value
        return cls.model_validate(values)
