"""Configuration settings using pydantic-settings."""

from collections.abc import Mapping
from functools import lru_cache
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict, YamlConfigSettingsSource

from blurry.config.constants import DEFAULT_CONFIG_FILE, DEFAULT_IMAGE_WORKERS
from blurry.exceptions import ConfigurationError


class BlurrySettings(BaseSettings):
    """Main configuration class for blurry."""

    model_config = SettingsConfigDict(
        env_prefix="BLURRY_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls, settings_cls, init_settings, env_settings, dotenv_settings, file_secret_settings
    ):
        """Customize settings sources to include YAML file."""
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls, yaml_file=DEFAULT_CONFIG_FILE),
            file_secret_settings,
        )

    # Base used to resolve relative image references
    image_base_path: str = ""

    image_workers: int = Field(default=DEFAULT_IMAGE_WORKERS, ge=1)
    encode_timeout: float | None = Field(default=None, gt=0)  # seconds per image, None = no limit

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_file: str | None = None


class TransformOptions(BaseModel):
    """Runtime parameters for a single transform run."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    image_base_path: str = Field(default="", alias="imageBasePath")

    @classmethod
    def from_settings(cls, settings: BlurrySettings) -> "TransformOptions":
        """Build options from application settings."""
        return cls(image_base_path=settings.image_base_path)

    @classmethod
    def coerce(cls, options: "TransformOptions | Mapping[str, Any] | None") -> "TransformOptions":
        """Accept options as a model, a mapping or None."""
        if options is None:
            return cls()
        if isinstance(options, cls):
            return options
        try:
            return cls.model_validate(dict(options))
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid transform options: {e}") from e


@lru_cache
def get_settings() -> BlurrySettings:
    """Get cached settings instance."""
    return BlurrySettings()


def reload_settings() -> BlurrySettings:
    """Force reload settings (clear cache)."""
    get_settings.cache_clear()
    return get_settings()
