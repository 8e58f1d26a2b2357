"""Routine loader configuration loading and validation.

Loads YAML configuration for the routine loader with full validation.
"""
from __future__ import annotations
import os
import re
import yaml
from pathlib import Path
from typing import Literal
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

PLACEHOLDER_KEY = re.compile(r"^@[A-Za-z0-9_.]+(%type)?@$", re.IGNORECASE)


class SessionConfig(BaseModel):
    """Session settings under which routines are loaded and run."""
    sql_mode: str = Field(..., description="SQL mode")
    character_set: str = Field("utf8mb4", description="Default character set")
    collation: str = Field("utf8mb4_general_ci", description="Default collation")


class SourcesConfig(BaseModel):
    """Location of routine source files."""
    directory: Path = Field(..., description="Directory with routine sources")
    extension: str = Field(".psql", description="Extension of routine sources")

    @field_validator("extension")
    @classmethod
    def validate_extension(cls, v: str) -> str:
        """Require a leading dot."""
        if not v.startswith("."):
            raise ValueError("extension must start with '.'")
        return v


class MetadataConfig(BaseModel):
    """Where compiled metadata is persisted."""
    backend: Literal["json", "postgres"] = Field("json", description="Metadata store backend")
    path: Path = Field(Path("etc/routines.json"), description="JSON metadata file")
    dsn: str | None = Field(None, description="PostgreSQL URL for the postgres backend")
    table: str = Field("routine_metadata", description="Table for the postgres backend")

    @field_validator("table")
    @classmethod
    def validate_table(cls, v: str) -> str:
        """Table name is used in SQL text, keep it an identifier."""
        if not re.match(r"^[A-Za-z_][A-Za-z0-9_]*$", v):
            raise ValueError(f"invalid table name: {v}")
        return v

    def model_post_init(self, __context) -> None:
        """Validate backend-specific configuration."""
        if self.backend == "postgres":
            if not self.dsn:
                raise ValueError("metadata.dsn required when backend=postgres")
            if not self.dsn.startswith(("postgresql://", "postgres://")):
                raise ValueError("metadata.dsn must start with 'postgresql://'")


class LoaderConfig(BaseModel):
    """Complete routine loader configuration."""
    database: SessionConfig
    sources: SourcesConfig
    metadata: MetadataConfig = Field(default_factory=MetadataConfig)
    replace_pairs: dict[str, str] = Field(default_factory=dict, description="Placeholder values")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field("INFO", description="Log level")

    @field_validator("replace_pairs", mode="before")
    @classmethod
    def normalize_replace_pairs(cls, v: dict | None) -> dict[str, str]:
        """Upper case placeholder keys and stringify values."""
        if v is None:
            return {}
        pairs = {}
        for key, value in v.items():
            key = str(key).upper()
            if not PLACEHOLDER_KEY.match(key):
                raise ValueError(f"invalid placeholder: {key}")
            pairs[key] = "" if value is None else str(value)
        return pairs

    @classmethod
    def from_yaml(cls, path: str | Path) -> LoaderConfig:
        """Load configuration from YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            Validated LoaderConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If configuration is invalid
        """
        config_path = Path(path)

        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path, 'r') as f:
            data = yaml.safe_load(f)

        if not data:
            raise ValueError(f"Empty configuration file: {config_path}")

        try:
            return cls.model_validate(data)
        except Exception as e:
            raise ValueError(f"Invalid configuration in {config_path}: {e}") from e

    @classmethod
    def from_env(cls, env_var: str = "ROUTINE_STRATUM_CONFIG") -> LoaderConfig:
        """Load configuration from path in environment variable.

        Args:
            env_var: Environment variable name (default: ROUTINE_STRATUM_CONFIG)

        Returns:
            Validated LoaderConfig instance

        Raises:
            ValueError: If env var not set or config invalid
        """
        load_dotenv()
        config_path = os.getenv(env_var)

        if not config_path:
            # Try default path
            default_path = Path("config/routine-stratum.yaml")
            if default_path.exists():
                return cls.from_yaml(default_path)
            raise ValueError(
                f"Environment variable {env_var} not set and default config not found at {default_path}"
            )

        return cls.from_yaml(config_path)

    def log_redacted(self) -> dict:
        """Get configuration dict with secrets redacted for logging.

        Returns:
            Dictionary with sensitive values redacted
        """
        config_dict = self.model_dump(mode="json")

        dsn = config_dict["metadata"].get("dsn")
        if dsn and "@" in dsn:
            credentials, host = dsn.rsplit("@", 1)
            scheme, _, user_pass = credentials.partition("://")
            user = user_pass.split(":")[0]
            config_dict["metadata"]["dsn"] = f"{scheme}://{user}:***@{host}"

        return config_dict


def load_loader_config(config_path: str | Path | None = None) -> LoaderConfig:
    """Load loader configuration from file or environment.

    Args:
        config_path: Optional explicit path to config file

    Returns:
        Validated LoaderConfig instance

    Raises:
        ValueError: If configuration is invalid or not found
    """
    if config_path:
        return LoaderConfig.from_yaml(config_path)

    return LoaderConfig.from_env()
