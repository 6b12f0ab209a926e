"""Settings file loading helpers."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path

import yaml

from .models import LookupSettings

CONFIG_EXTENSIONS = (".yaml", ".yml", ".json")
SETTINGS_FILENAME = "timetraveller.yaml"
HOME_ENV_VAR = "TIMETRAVELLER_HOME"


def _read_file(path: Path) -> dict:
    text = path.read_text(encoding="utf-8")
    if path.suffix in (".yaml", ".yml"):
        data = yaml.safe_load(text) or {}
    else:
        data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError(f"Configuration file must contain a mapping: {path}")
    return data


def _write_file(path: Path, payload: dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as stream:
        if path.suffix in (".yaml", ".yml"):
            yaml.safe_dump(payload, stream, allow_unicode=True, sort_keys=False)
        else:
            json.dump(payload, stream, indent=2, ensure_ascii=False)


@dataclass(slots=True)
class ConfigLocator:
    """Resolve the project home and the paths derived from it."""

    project_root: Path | None = None
    logs_dir: Path | None = None

    def __post_init__(self) -> None:
        env_root = os.environ.get(HOME_ENV_VAR)
        if env_root:
            root = Path(env_root).expanduser().resolve()
        else:
            root = (self.project_root or Path.cwd()).resolve()
        self.project_root = root
        self.logs_dir = (root / "logs").resolve()

    def settings_path(self) -> Path:
        return self.project_root / SETTINGS_FILENAME


class ConfigRepository:
    """Read and write lookup settings with schema validation."""

    def __init__(self, locator: ConfigLocator | None = None) -> None:
        self.locator = locator or ConfigLocator()

    def load_settings(self, path: Path | None = None) -> LookupSettings:
        """Load settings from ``path`` or the default file.

        An explicit path must exist; the default file is optional and
        missing means built-in defaults.
        """

        if path is not None:
            if path.suffix not in CONFIG_EXTENSIONS:
                raise ValueError(f"Unsupported configuration format: {path.suffix}")
            if not path.exists():
                raise FileNotFoundError(f"Configuration file not found: {path}")
            return LookupSettings.model_validate(_read_file(path))
        default_path = self.locator.settings_path()
        if default_path.exists():
            return LookupSettings.model_validate(_read_file(default_path))
        return LookupSettings()

    def save_settings(self, settings: LookupSettings, path: Path | None = None) -> Path:
        target = path or self.locator.settings_path()
        _write_file(target, settings.model_dump(mode="json"))
        return target


__all__ = ["CONFIG_EXTENSIONS", "ConfigLocator", "ConfigRepository", "HOME_ENV_VAR"]
