from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Mapping

try:  # Python 3.11+
    import tomllib
except ModuleNotFoundError:  # pragma: no cover
    import tomli as tomllib  # type: ignore

from .errors import ValidationError
from .localization import SUPPORTED_LOCALES
from .models import DEFAULT_COLOR

CONFIG_ENV_PREFIX = "CORVEE_"
DEFAULT_CONFIG_PATH = Path("config.toml")


@dataclass(slots=True)
class GeneralConfig:
    default_locale: str = "fr-FR"
    name_width: int = 18
    seed_defaults: bool = True
    default_color: str = DEFAULT_COLOR
    day_format: str = "EE dd MMM"


@dataclass(slots=True)
class TaskConfig:
    min_weight: int = 1
    max_weight: int = 9


@dataclass(slots=True)
class HistoryConfig:
    undo_depth: int = 64


SECTIONS: tuple[str, ...] = ("general", "tasks", "history")


@dataclass(slots=True)
class Config:
    general: GeneralConfig = field(default_factory=GeneralConfig)
    tasks: TaskConfig = field(default_factory=TaskConfig)
    history: HistoryConfig = field(default_factory=HistoryConfig)

    @classmethod
    def load(
        cls,
        path: Path | None = None,
        *,
        env: Mapping[str, str] | None = None,
        overrides: Mapping[str, Any] | None = None,
    ) -> "Config":
        cfg = cls()
        cfg_path = path or DEFAULT_CONFIG_PATH
        if cfg_path.exists():
            try:
                data = tomllib.loads(cfg_path.read_text(encoding="utf-8"))
            except tomllib.TOMLDecodeError as exc:
                raise ValidationError(f"Invalid TOML in {cfg_path}: {exc}") from exc
            cfg = cfg.merge_dict(data)
        if env:
            cfg = cfg.apply_env(env)
        if overrides:
            cfg = cfg.apply_overrides(overrides)
        cfg.validate()
        return cfg

    def merge_dict(self, data: Mapping[str, Any]) -> "Config":
        cfg = deepcopy(self)
        for section in SECTIONS:
            if section in data:
                cfg._assign_dataclass(getattr(cfg, section), data[section])
        return cfg

    def apply_env(self, env: Mapping[str, str]) -> "Config":
        payload: Dict[str, Dict[str, str]] = {}
        for key, value in env.items():
            if not key.startswith(CONFIG_ENV_PREFIX):
                continue
            remainder = key[len(CONFIG_ENV_PREFIX) :]
            pieces = [part for part in remainder.split("__") if part]
            if len(pieces) != 2:
                continue
            section, field_name = pieces
            payload.setdefault(section.lower(), {})[field_name.lower()] = value
        return self.merge_dict(payload)

    def apply_overrides(self, overrides: Mapping[str, Any]) -> "Config":
        cfg = deepcopy(self)
        for key, value in overrides.items():
            section = key.split(".", 1)[0]
            if section not in SECTIONS or "." not in key:
                raise ValidationError(f"Unknown override: {key}")
            cfg._set_with_prefix(getattr(cfg, section), key, value)
        return cfg

    def _assign_dataclass(self, instance: Any, data: Mapping[str, Any]) -> None:
        for field_obj in fields(instance):
            name = field_obj.name
            if name not in data:
                continue
            value = self._convert_value(field_obj.type, data[name])
            setattr(instance, name, value)

    def _set_with_prefix(self, instance: Any, dotted_key: str, value: Any) -> None:
        _, field_name = dotted_key.split(".", 1)
        field_obj = next((f for f in fields(instance) if f.name == field_name), None)
        if field_obj is None:
            raise ValidationError(f"Unknown field: {dotted_key}")
        setattr(instance, field_name, self._convert_value(field_obj.type, value))

    @staticmethod
    def _convert_value(expected_type: Any, value: Any) -> Any:
        # field types are strings under postponed annotations
        name = expected_type if isinstance(expected_type, str) else getattr(expected_type, "__name__", "")
        try:
            if name == "bool":
                if isinstance(value, str):
                    return value.strip().lower() in {"1", "true", "yes", "oui"}
                return bool(value)
            if name == "int":
                return int(value)
            if name == "str":
                return str(value)
        except (TypeError, ValueError) as exc:
            raise ValidationError(f"Invalid value: {value!r}") from exc
        return value

    def validate(self) -> None:
        if self.general.default_locale not in SUPPORTED_LOCALES:
            raise ValidationError(f"Unsupported locale: {self.general.default_locale}")
        if self.general.name_width < 8:
            raise ValidationError("name_width must be at least 8")
        if not self.general.day_format.strip():
            raise ValidationError("day_format must not be empty")
        if self.tasks.min_weight < 1:
            raise ValidationError("min_weight must be >= 1")
        if self.tasks.max_weight < self.tasks.min_weight:
            raise ValidationError("max_weight must be >= min_weight")
        if self.history.undo_depth < 0:
            raise ValidationError("undo_depth must not be negative")

    def to_toml(self) -> str:
        lines: list[str] = []
        lines.append("[general]")
        lines.append(f"default_locale = \"{self.general.default_locale}\"")
        lines.append(f"name_width = {self.general.name_width}")
        lines.append(f"seed_defaults = {str(self.general.seed_defaults).lower()}")
        lines.append(f"default_color = \"{self.general.default_color}\"")
        lines.append(f"day_format = \"{self.general.day_format}\"")
        lines.append("")
        lines.append("[tasks]")
        lines.append(f"min_weight = {self.tasks.min_weight}")
        lines.append(f"max_weight = {self.tasks.max_weight}")
        lines.append("")
        lines.append("[history]")
        lines.append(f"undo_depth = {self.history.undo_depth}")
        lines.append("")
        return "\n".join(lines)
