"""Global configuration for the event admin console."""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

DEFAULTS: dict[str, Any] = {
    "base_url": "http://localhost:5000/api",
    "tenant_id": "",
    "auxiliary_header_name": "myheader",
    "auxiliary_header_value": "123ABC",
    "display_timezone": "UTC",
    "default_page_size": 10,
    "desktop_breakpoint": 768,
    "success_notification_seconds": 3,
    "error_notification_seconds": 5,
    "enforce_end_after_start": False,
    "seed_events": 10,
    "seed_invitees_per_event": 3,
    "app_host": "0.0.0.0",
    "app_port": 8000,
}

TYPE_CASTERS: dict[str, Callable[[Any], Any]] = {
    "base_url": str,
    "tenant_id": str,
    "auxiliary_header_name": str,
    "auxiliary_header_value": str,
    "display_timezone": str,
    "default_page_size": int,
    "desktop_breakpoint": int,
    "success_notification_seconds": int,
    "error_notification_seconds": int,
    "enforce_end_after_start": bool,
    "seed_events": int,
    "seed_invitees_per_event": int,
    "app_host": str,
    "app_port": int,
}


@dataclass(frozen=True)
class Settings:
    base_dir: Path
    base_url: str
    tenant_id: str
    auxiliary_header_name: str
    auxiliary_header_value: str
    display_timezone: str
    default_page_size: int
    desktop_breakpoint: int
    success_notification_seconds: int
    error_notification_seconds: int
    enforce_end_after_start: bool
    seed_events: int
    seed_invitees_per_event: int
    app_host: str
    app_port: int
    config_path: Path

    @property
    def auxiliary_header(self) -> tuple[str, str]:
        return self.auxiliary_header_name, self.auxiliary_header_value


def _boolify(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"1", "true", "yes", "on"}:
            return True
        if lowered in {"0", "false", "no", "off"}:
            return False
    raise ValueError(f"Cannot parse boolean value from {value!r}")


def _cast_value(key: str, value: Any) -> Any:
    if key not in TYPE_CASTERS:
        return value
    caster = TYPE_CASTERS[key]
    if caster is bool:
        return _boolify(value)
    return caster(value)


def _load_toml_config(config_path: Path) -> dict[str, Any]:
    if not config_path.exists():
        return {}
    with config_path.open("rb") as handle:
        return tomllib.load(handle)


def _config_layered_value(key: str, *, toml_config: dict[str, Any]) -> Any:
    env_key = f"EVENTADMIN_{key.upper()}"
    if env_key in os.environ:
        return _cast_value(key, os.environ[env_key])
    if key in toml_config:
        return _cast_value(key, toml_config[key])
    return DEFAULTS[key]


def load_settings(config_override: Path | None = None) -> Settings:
    base_dir = Path(os.getenv("EVENTADMIN_BASE_DIR", Path.cwd()))
    env_config = os.getenv("EVENTADMIN_CONFIG")
    config_path = Path(config_override or env_config or base_dir / "eventadmin.toml")
    toml_config = _load_toml_config(config_path)

    values = {
        key: _config_layered_value(key, toml_config=toml_config) for key in DEFAULTS
    }
    values["base_url"] = values["base_url"].rstrip("/")
    if values["default_page_size"] < 1:
        raise ValueError("default_page_size must be >= 1")
    return Settings(base_dir=base_dir, config_path=config_path, **values)


def settings_as_dict(settings: Settings) -> dict[str, Any]:
    return {
        "base_dir": str(settings.base_dir),
        **{key: getattr(settings, key) for key in DEFAULTS},
    }


def _toml_literal(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    escaped = str(value).replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def write_config_file(config: dict[str, Any], *, path: Path) -> None:
    lines = ["# Event admin console configuration\n"]
    for key in sorted(config.keys()):
        lines.append(f"{key} = {_toml_literal(config[key])}\n")
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("".join(lines), encoding="utf-8")


def update_config_file(updates: dict[str, Any], *, path: Path | None = None) -> Settings:
    """Persist ``updates`` and return the settings the next start will see.

    The running process keeps the settings it resolved at startup.
    """
    target_path = path or settings.config_path
    existing = _load_toml_config(target_path)
    merged = {**existing}
    for key, value in updates.items():
        if key not in DEFAULTS:
            continue
        merged[key] = _cast_value(key, value)
    write_config_file(merged, path=target_path)
    return load_settings(target_path)


settings = load_settings()
