"""Unit tests for configuration Pydantic models."""

import pytest
from pydantic import ValidationError

from scribe.config.models import (
    AuditConfig,
    LoggingConfig,
    MetricsConfig,
    ObservabilityConfig,
    PostgresConfig,
    StorageConfig,
)


class TestAuditConfig:
    """Tests for AuditConfig model."""

    def test_defaults(self) -> None:
        """Default values are correct."""
        config = AuditConfig()
        assert config.enabled is True
        assert config.sink == "postgres"
        assert config.table == "audit_logs"
        assert config.max_pending is None
        assert config.log_payload_on_failure is True

    def test_max_pending_must_be_positive(self) -> None:
        """max_pending must be > 0 when set."""
        with pytest.raises(ValidationError):
            AuditConfig(max_pending=0)

    def test_unknown_sink_rejected(self) -> None:
        with pytest.raises(ValidationError):
            AuditConfig(sink="kafka")

    def test_table_name_validated(self) -> None:
        """Table names are restricted to safe identifiers."""
        with pytest.raises(ValidationError):
            AuditConfig(table="audit_logs; DROP TABLE x")


class TestStorageConfig:
    """Tests for StorageConfig model."""

    def test_defaults(self) -> None:
        config = StorageConfig()
        assert config.entities == "postgres"
        assert config.entities_table == "entities"
        assert isinstance(config.postgres, PostgresConfig)

    def test_pool_sizes_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            PostgresConfig(min_pool_size=0)
        with pytest.raises(ValidationError):
            PostgresConfig(command_timeout=0)


class TestObservabilityConfig:
    """Tests for ObservabilityConfig model."""

    def test_defaults(self) -> None:
        """Default values are correct."""
        config = ObservabilityConfig()
        assert config.logging == LoggingConfig()
        assert config.metrics == MetricsConfig()
        assert config.logging.format == "json"
        assert config.logging.redact_pii is True
        assert config.metrics.enabled is True

    def test_invalid_level_rejected(self) -> None:
        with pytest.raises(ValidationError):
            LoggingConfig(level="VERBOSE")

    def test_invalid_format_rejected(self) -> None:
        with pytest.raises(ValidationError):
            LoggingConfig(format="xml")
