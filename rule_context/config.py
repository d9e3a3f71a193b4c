from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from jsonschema import Draft202012Validator
from jsonschema.exceptions import ValidationError

from rule_context.constants import (
    APP_NAME,
    CONFIG_FILENAME,
    DEFAULT_MAX_WORKERS,
    IGNORED_DIRS,
    RULE_EXTENSION,
    RULES_DIRNAME,
)
from rule_context.errors import InvalidConfigError
from rule_context.utils import read_json, write_json


SETTINGS_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "rules_dir": {"type": "string", "minLength": 1},
        "extension": {"type": "string", "pattern": r"^\.[^/\\]+$"},
        "case_sensitive": {"type": "boolean"},
        "ignored_dirs": {
            "type": "array",
            "items": {"type": "string", "minLength": 1},
            "uniqueItems": True,
        },
        "max_workers": {"type": "integer", "minimum": 1, "maximum": 64},
        "project_root": {"type": ["string", "null"]},
    },
}


def format_schema_error(error: ValidationError) -> str:
    location = "/".join(str(item) for item in error.absolute_path)
    if location:
        return f"{location}: {error.message}"
    return error.message


@dataclass(frozen=True)
class Settings:
    rules_dir: str = RULES_DIRNAME
    extension: str = RULE_EXTENSION
    case_sensitive: bool = True
    ignored_dirs: tuple[str, ...] = IGNORED_DIRS
    max_workers: int = DEFAULT_MAX_WORKERS
    project_root: Optional[Path] = None

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "Settings":
        defaults = cls()
        project_root = payload.get("project_root")
        return cls(
            rules_dir=payload.get("rules_dir", defaults.rules_dir),
            extension=payload.get("extension", defaults.extension),
            case_sensitive=payload.get("case_sensitive", defaults.case_sensitive),
            ignored_dirs=tuple(payload.get("ignored_dirs", defaults.ignored_dirs)),
            max_workers=payload.get("max_workers", defaults.max_workers),
            project_root=Path(project_root).expanduser() if project_root else None,
        )

    def as_dict(self) -> dict[str, Any]:
        return {
            "rules_dir": self.rules_dir,
            "extension": self.extension,
            "case_sensitive": self.case_sensitive,
            "ignored_dirs": list(self.ignored_dirs),
            "max_workers": self.max_workers,
            "project_root": str(self.project_root) if self.project_root else None,
        }

    def rules_root(self, base: Optional[Path] = None) -> Path:
        path = Path(self.rules_dir).expanduser()
        if path.is_absolute():
            return path
        return (base or Path.cwd()) / path


class ConfigRepository:
    def __init__(self, root: Optional[Path] = None) -> None:
        self._root = root or (Path.home() / ".config" / APP_NAME)
        self._validator = Draft202012Validator(SETTINGS_SCHEMA)

    @property
    def root(self) -> Path:
        return self._root

    @property
    def config_path(self) -> Path:
        return self.root / CONFIG_FILENAME

    def validate(self, payload: Any, path: Path) -> None:
        error = next(iter(self._validator.iter_errors(payload)), None)
        if error is not None:
            raise InvalidConfigError(path, format_schema_error(error))

    def load_settings(self, path: Optional[Path] = None) -> Settings:
        config_path = path or self.config_path
        if not config_path.exists():
            if path is not None:
                raise InvalidConfigError(config_path, "file not found")
            return Settings()
        if config_path.stat().st_size == 0:
            return Settings()
        try:
            payload = read_json(config_path)
        except ValueError as exc:
            raise InvalidConfigError(config_path, f"invalid JSON: {exc}") from exc
        except OSError as exc:
            raise InvalidConfigError(config_path, str(exc)) from exc
        self.validate(payload, config_path)
        return Settings.from_dict(payload)

    def save_settings(self, settings: Settings) -> Path:
        payload = settings.as_dict()
        self.validate(payload, self.config_path)
        write_json(self.config_path, payload)
        return self.config_path
