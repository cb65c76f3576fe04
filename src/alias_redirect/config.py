"""Configuration models and loading logic."""

from __future__ import annotations

import os
from pathlib import Path
from typing import ClassVar

from pydantic import BaseModel, Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from alias_redirect.models import RedirectConfig, ScanConfig

DEFAULT_SETTINGS_FILE = Path("configs/settings.yaml")
SETTINGS_FILE_ENV = "ALIAS_REDIRECT_SETTINGS_FILE"


class RedirectSettings(BaseModel):
    """Root path and the old/new target prefixes."""

    root_path: Path = Path("/Volumes/Disk1")
    search_prefix: str = Field(default="/Volumes/DiskOld/", min_length=1)
    replace_prefix: str = "/Volumes/Disk1/"


class ScanSettings(BaseModel):
    """Tree traversal switches."""

    include_package_contents: bool = False


class ResolutionSettings(BaseModel):
    """Bounds on alias resolution."""

    timeout_sec: float = Field(default=30.0, gt=0.0)


class ReportingSettings(BaseModel):
    """Outcome reporting behavior."""

    quiet: bool = False
    summary_dir: Path | None = None


class PathsConfig(BaseModel):
    """Filesystem paths used by the tool itself."""

    logs_root: Path = Path("./logs")

    def resolved(self, project_root: Path) -> "PathsConfig":
        """Return a copy with project-relative paths resolved to absolute paths."""

        updates: dict[str, Path] = {}
        for field_name in type(self).model_fields:
            value = getattr(self, field_name)
            updates[field_name] = value if value.is_absolute() else (project_root / value).resolve()
        return self.model_copy(update=updates)


class AppSettings(BaseSettings):
    """Top-level application settings."""

    _yaml_file_override: ClassVar[Path | None] = None

    redirect: RedirectSettings = Field(default_factory=RedirectSettings)
    scan: ScanSettings = Field(default_factory=ScanSettings)
    resolution: ResolutionSettings = Field(default_factory=ResolutionSettings)
    reporting: ReportingSettings = Field(default_factory=ReportingSettings)
    paths: PathsConfig = Field(default_factory=PathsConfig)

    model_config = SettingsConfigDict(
        env_prefix="ALIAS_REDIRECT_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
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
        """Use YAML defaults while allowing env vars to override values."""

        yaml_file = resolve_settings_file(cls._yaml_file_override)
        yaml_settings = YamlConfigSettingsSource(settings_cls, yaml_file=yaml_file)
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            yaml_settings,
            file_secret_settings,
        )

    def as_dict(self) -> dict[str, object]:
        """Return settings as a standard nested dictionary."""

        return self.model_dump(mode="json")

    def scan_config(self, root_path: Path | None = None, include_package_contents: bool | None = None) -> ScanConfig:
        """Build the immutable scan parameters, applying optional overrides."""

        return ScanConfig(
            root_path=_absolute(root_path or self.redirect.root_path),
            include_package_contents=(
                self.scan.include_package_contents if include_package_contents is None else include_package_contents
            ),
        )

    def redirect_config(
        self,
        root_path: Path | None = None,
        search_prefix: str | None = None,
        replace_prefix: str | None = None,
    ) -> RedirectConfig:
        """Build the immutable redirect parameters, applying optional overrides."""

        return RedirectConfig(
            root_path=_absolute(root_path or self.redirect.root_path),
            search_prefix=self.redirect.search_prefix if search_prefix is None else search_prefix,
            replace_prefix=self.redirect.replace_prefix if replace_prefix is None else replace_prefix,
        )


def _absolute(path: Path) -> Path:
    return Path(path).expanduser().resolve()


def find_project_root(start: Path | None = None) -> Path:
    """Locate the project root by traversing upward for config markers."""

    current = (start or Path.cwd()).resolve()
    for candidate in (current, *current.parents):
        if (candidate / DEFAULT_SETTINGS_FILE).exists():
            return candidate
    return current


def resolve_settings_file(override: Path | None = None) -> Path:
    """Resolve settings file from explicit override, env var, or default."""

    chosen = override
    if chosen is None:
        env_value = os.getenv(SETTINGS_FILE_ENV)
        if env_value:
            chosen = Path(env_value)
    if chosen is None:
        chosen = DEFAULT_SETTINGS_FILE

    if not chosen.is_absolute():
        chosen = (find_project_root() / chosen).resolve()
    return chosen


def load_settings(config_file: Path | None = None) -> AppSettings:
    """Load settings with YAML defaults and environment variable overrides."""

    settings_file = resolve_settings_file(config_file)
    project_root = settings_file.parent.parent.resolve()
    AppSettings._yaml_file_override = settings_file
    try:
        settings = AppSettings()
    finally:
        AppSettings._yaml_file_override = None
    resolved_paths = settings.paths.resolved(project_root=project_root)
    return settings.model_copy(update={"paths": resolved_paths})
