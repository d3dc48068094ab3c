"""Root settings model for Scribe.

Sources, highest priority first: constructor arguments, ``SCRIBE_*``
environment variables (``__`` separates nested sections), the merged TOML
layers passed to ``Settings.from_toml``, model defaults.
"""

from contextvars import ContextVar
from typing import Any

from pydantic import Field, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from scribe.config.models.audit import AuditConfig
from scribe.config.models.observability import ObservabilityConfig
from scribe.config.models.storage import StorageConfig

_toml_layers: ContextVar[dict[str, Any] | None] = ContextVar(
    "scribe_toml_layers", default=None
)


class TomlLayersSource(PydanticBaseSettingsSource):
    """Settings source over TOML values already loaded and merged."""

    def __init__(self, settings_cls: type[BaseSettings], values: dict[str, Any]) -> None:
        super().__init__(settings_cls)
        self._values = values

    def get_field_value(
        self, field: Any, field_name: str  # noqa: ARG002
    ) -> tuple[Any, str, bool]:
        value = self._values.get(field_name)
        return value, field_name, value is not None

    def __call__(self) -> dict[str, Any]:
        return {key: value for key, value in self._values.items() if value is not None}


class Settings(BaseSettings):
    """Scribe configuration: audit dispatch, storage backends, observability."""

    model_config = SettingsConfigDict(
        env_prefix="SCRIBE_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = Field(default="scribe", description="Bound into startup log events")
    debug: bool = Field(default=False, description="Force DEBUG logging")

    audit: AuditConfig = Field(default_factory=AuditConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)

    @model_validator(mode="after")
    def _debug_logging(self) -> "Settings":
        if self.debug:
            self.observability.logging.level = "DEBUG"
        return self

    @classmethod
    def from_toml(cls, values: dict[str, Any], **overrides: Any) -> "Settings":
        """Build settings with ``values`` as the TOML layer."""
        token = _toml_layers.set(values)
        try:
            return cls(**overrides)
        finally:
            _toml_layers.reset(token)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            TomlLayersSource(settings_cls, _toml_layers.get() or {}),
        )
