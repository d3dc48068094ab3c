"""Configuration section models."""

from scribe.config.models.audit import AuditConfig
from scribe.config.models.observability import (
    LoggingConfig,
    MetricsConfig,
    ObservabilityConfig,
)
from scribe.config.models.storage import PostgresConfig, StorageConfig

__all__ = [
    "AuditConfig",
    "LoggingConfig",
    "MetricsConfig",
    "ObservabilityConfig",
    "PostgresConfig",
    "StorageConfig",
]
