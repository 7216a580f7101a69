"""Settings for the reading pipeline and the history API."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from outloud.errors import ConfigError, ConfigFailure

API_KEY_PLACEHOLDER = "YOUR_API_KEY_HERE"
API_KEY_PREFIX = "sk-"

# (yaml section, yaml key) -> Settings field
YAML_FIELDS: dict[tuple[str, str], str] = {
    ("server", "host"): "host",
    ("server", "port"): "port",
    ("audio", "sample_rate"): "audio_sample_rate",
    ("audio", "channels"): "audio_channels",
    ("audio", "input_device"): "audio_input_device",
    ("audio", "max_recording_duration"): "max_recording_duration",
    ("openai", "api_key"): "openai_api_key",
    ("openai", "base_url"): "api_base_url",
    ("openai", "transcription_model"): "transcription_model",
    ("storage", "max_session_history"): "max_session_history",
}


def _find_project_root() -> Path:
    """Nearest ancestor of this file holding pyproject.toml."""
    here = Path(__file__).resolve()
    return next(
        (p for p in here.parents if (p / "pyproject.toml").is_file()),
        here.parents[2],
    )


class YamlSettingsSource(PydanticBaseSettingsSource):
    """Reads config/settings.yaml and maps its sections onto flat field names."""

    def get_field_value(self, field_name: str) -> tuple[Any, str, bool]:
        # Unused; the whole file is read in __call__.
        return None, field_name, False

    def __call__(self) -> dict[str, Any]:
        path = _find_project_root() / "config" / "settings.yaml"
        if not path.is_file():
            return {}
        with path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        values: dict[str, Any] = {}
        for (section, key), field in YAML_FIELDS.items():
            value = (data.get(section) or {}).get(key)
            if value is not None:
                values[field] = value
        return values


class Settings(BaseSettings):
    """Configuration resolved from init args, env, .env and settings.yaml."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    openai_api_key: str = Field(default="", description="OpenAI API key")
    api_base_url: str = Field(default="https://api.openai.com/v1")
    transcription_model: str = Field(default="whisper-1")

    audio_sample_rate: int = Field(default=44100)
    audio_channels: int = Field(default=1, ge=1)
    audio_input_device: int | None = None
    max_recording_duration: float = Field(default=300.0, gt=0)  # seconds

    max_session_history: int = Field(default=100, ge=1)

    host: str = "127.0.0.1"
    port: int = 8000

    project_root: Path = Field(default_factory=_find_project_root)

    def _data_dir(self, name: str) -> Path:
        path = self.project_root / "data" / name
        path.mkdir(parents=True, exist_ok=True)
        return path

    @property
    def recordings_dir(self) -> Path:
        return self._data_dir("recordings")

    @property
    def sessions_dir(self) -> Path:
        return self._data_dir("sessions")

    @property
    def is_configured(self) -> bool:
        """True when an API key other than the template placeholder is set."""
        key = self.openai_api_key.strip()
        return bool(key) and key != API_KEY_PLACEHOLDER

    def validate_credentials(self) -> None:
        """Raise ConfigError if the API key is missing or malformed."""
        if not self.is_configured:
            raise ConfigError(ConfigFailure.MISSING_CREDENTIAL)
        if not self.openai_api_key.strip().startswith(API_KEY_PREFIX):
            raise ConfigError(ConfigFailure.INVALID_CREDENTIAL_FORMAT)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # settings.yaml sits below env and .env so deployments can override it.
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlSettingsSource(settings_cls),
            file_secret_settings,
        )


def load_settings(**overrides: Any) -> Settings:
    """Build a fresh Settings value; callers pass it on explicitly."""
    return Settings(**overrides)
