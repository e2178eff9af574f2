"""Application configuration."""

import os
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

DEFAULT_CONFIG_FILE = Path.home() / ".config" / "orgwiki" / "config.yaml"

# argv template; {file}, {name} and {root} are filled per page, so literal
# braces (inside an --eval form, say) must be doubled: {{ and }}.
DEFAULT_EXPORT_COMMAND = [
    "emacs",
    "--batch",
    "{file}",
    "--eval",
    "(progn (require 'ox-html) (org-html-export-to-html))",
]


def config_file_path() -> Path:
    """Location of the optional YAML config file."""
    override = os.environ.get("ORGWIKI_CONFIG_FILE")
    if override:
        return Path(override).expanduser()
    return DEFAULT_CONFIG_FILE


class Settings(BaseSettings):
    """Settings loaded from init args, environment, .env and a YAML file."""

    wiki_root: Path = Field(default_factory=lambda: Path.home() / "org" / "wiki")
    index_page: str = "index"
    extension: str = "org"
    export_command: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXPORT_COMMAND)
    )
    server_host: str = "127.0.0.1"
    server_port: int = 8000
    debug: bool = False
    app_title: str = "OrgWiki"

    model_config = SettingsConfigDict(
        env_prefix="ORGWIKI_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("wiki_root")
    @classmethod
    def _expand_root(cls, value: Path) -> Path:
        return value.expanduser()

    @field_validator("extension")
    @classmethod
    def _strip_dot(cls, value: str) -> str:
        return value.lstrip(".")

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Environment wins over the YAML file.
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls, yaml_file=config_file_path()),
            file_secret_settings,
        )


settings = Settings()
