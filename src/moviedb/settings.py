# WARNING: Keep API keys out of version control. Never commit your .env file
# or a config.toml that holds a key.

"""Settings loader for the moviedb client.

Values are resolved with the precedence init kwargs > environment variables
(``MOVIEDB_*``) > ``.env`` file > TOML config file > defaults.

The TOML file lives at ``$XDG_CONFIG_HOME/moviedb/config.toml`` (falling back
to ``~/.config/moviedb/config.toml``) and is read from its ``[moviedb]``
table:

    [moviedb]
    api_key = "..."
    requests_per_second = 20
"""

import os
from pathlib import Path
from typing import Any

import tomli
from pydantic import Field
from pydantic.fields import FieldInfo
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)


class MissingAPIKeyError(Exception):
    """Raised when no API key is configured."""

    def __init__(self, key: str) -> None:
        """Initialize the error with the missing key name."""
        super().__init__(
            f"Missing required API key: {key}\n"
            "Set MOVIEDB_API_KEY or add api_key to the [moviedb] table of "
            f"{config_file()}"
        )
        self.key = key


def config_file() -> Path:
    """Location of the TOML config file, respecting XDG_CONFIG_HOME."""
    config_home = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return config_home / "moviedb" / "config.toml"


class TomlConfigSource(PydanticBaseSettingsSource):
    """Settings source reading the ``[moviedb]`` table of the TOML config."""

    def _read(self) -> dict[str, Any]:
        path = config_file()
        if not path.exists():
            return {}
        with path.open("rb") as f:
            data = tomli.load(f)
        section = data.get("moviedb", {})
        return section if isinstance(section, dict) else {}

    def get_field_value(self, field: FieldInfo, field_name: str) -> tuple[Any, str, bool]:
        return self._read().get(field_name), field_name, False

    def __call__(self) -> dict[str, Any]:
        return {
            name: value
            for name, value in self._read().items()
            if name in self.settings_cls.model_fields
        }


class Settings(BaseSettings):
    """Connection settings for the TMDB API."""

    api_key: str | None = None
    base_url: str = "https://api.themoviedb.org/3/"
    requests_per_second: float = Field(default=50, gt=0)
    timeout: float = Field(default=10.0, gt=0)

    model_config = SettingsConfigDict(
        env_prefix="MOVIEDB_", env_file=".env", extra="ignore"
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            TomlConfigSource(settings_cls),
            file_secret_settings,
        )

    def require_keys(self) -> None:
        """Raise MissingAPIKeyError if the API key is missing."""
        if not self.api_key:
            raise MissingAPIKeyError("MOVIEDB_API_KEY")
