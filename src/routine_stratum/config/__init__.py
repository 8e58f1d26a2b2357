"""Configuration management for the routine loader."""
from .loader import (
    LoaderConfig,
    MetadataConfig,
    SessionConfig,
    SourcesConfig,
    load_loader_config,
)

__all__ = [
    "LoaderConfig",
    "MetadataConfig",
    "SessionConfig",
    "SourcesConfig",
    "load_loader_config",
]
