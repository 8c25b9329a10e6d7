"""YAML run configuration and its validation."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence, Tuple

import yaml
from jsonschema import Draft7Validator

from tsrunner.core.errors import ConfigurationError

DEFAULT_CONFIG_NAME = "tsrunner.yaml"


@dataclass(frozen=True)
class RunnerConfig:
    """Settings for one harness invocation."""

    set_name: Optional[str] = None
    case_name: Optional[str] = None
    color: bool = True
    verbose: bool = False
    modules: Tuple[str, ...] = field(default_factory=tuple)

    def merged(self, **overrides: Any) -> "RunnerConfig":
        """Return a copy with every non-``None`` override applied."""

        values = {key: value for key, value in overrides.items() if value is not None}
        if "modules" in values:
            values["modules"] = tuple(self.modules) + tuple(values["modules"])
        return replace(self, **values)


def load_config(path: Optional[str] = None, *, cwd: Optional[Path] = None) -> RunnerConfig:
    """Load ``path``, or ``tsrunner.yaml`` from ``cwd`` when present.

    Returns the defaults when no file is given and none is found.
    """

    if path is None:
        candidate = (cwd or Path.cwd()) / DEFAULT_CONFIG_NAME
        if not candidate.is_file():
            return RunnerConfig()
        config_path = candidate
    else:
        config_path = Path(path).expanduser().resolve()
        if not config_path.is_file():
            raise ConfigurationError(f"Config file not found: {config_path}")
    try:
        raw = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Config file {config_path} is not valid YAML: {exc}") from exc
    return parse_config(raw)


def parse_config(raw: Any) -> RunnerConfig:
    if not isinstance(raw, Mapping):
        raise ConfigurationError("Config file must contain a mapping at the top level")
    errors = sorted(_validator.iter_errors(raw), key=lambda e: list(e.path))
    if errors:
        messages = "; ".join(f"{'/'.join(map(str, err.path)) or 'root'}: {err.message}" for err in errors)
        raise ConfigurationError(f"Config schema validation failed: {messages}")
    return RunnerConfig(
        set_name=_optional_str(raw.get("set_name")),
        case_name=_optional_str(raw.get("case_name")),
        color=bool(raw.get("color", True)),
        verbose=bool(raw.get("verbose", False)),
        modules=_parse_modules(raw.get("modules")),
    )


def _optional_str(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    text = value.strip()
    return text or None


def _parse_modules(raw: Optional[Sequence[str]]) -> Tuple[str, ...]:
    if not raw:
        return tuple()
    return tuple(item.strip() for item in raw if item.strip())


CONFIG_SCHEMA = {
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "set_name": {"type": ["string", "null"]},
        "case_name": {"type": ["string", "null"]},
        "color": {"type": "boolean"},
        "verbose": {"type": "boolean"},
        "modules": {"type": "array", "items": {"type": "string"}},
    },
}

_validator = Draft7Validator(CONFIG_SCHEMA)
