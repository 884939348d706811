from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml


class ConfigError(RuntimeError):
    pass


def _xdg_dir(env_var: str, fallback: str) -> Path:
    return Path(os.environ.get(env_var, fallback)).expanduser() / "navctl"


def default_cache_path() -> Path:
    return _xdg_dir("XDG_CACHE_HOME", "~/.cache") / "listings.json"


def default_credentials_path() -> Path:
    return _xdg_dir("XDG_CONFIG_HOME", "~/.config") / "credentials.json"


@dataclass
class Config:
    base_url: str
    version: int = 1
    timeout: Optional[float] = None
    cache_path: Optional[Path] = None
    credentials_path: Optional[Path] = None
    start_location: str = "#/"
    source_path: Optional[Path] = None

    def to_json(self) -> str:
        def _default(o: Any):
            if isinstance(o, Path):
                return str(o)
            if hasattr(o, "__dict__"):
                return o.__dict__
            return str(o)

        return json.dumps(self, default=_default, indent=2, sort_keys=True)


def _expand_env(value: Any) -> Any:
    if isinstance(value, str):
        # Expand ${VAR} style
        return os.path.expandvars(value)
    if isinstance(value, dict):
        return {k: _expand_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_expand_env(v) for v in value]
    return value


def _store_path(data: dict, key: str, default: Path) -> Optional[Path]:
    # An explicit null disables the store; a missing key uses the XDG default
    if key not in data:
        return default
    raw = data[key]
    if raw is None:
        return None
    return Path(str(raw)).expanduser()


def resolve_config_path() -> Path:
    # Highest priority: explicit override
    override = os.environ.get("NAVCTL_CONFIG")
    if override:
        p = Path(override).expanduser()
        if p.is_file():
            return p
        raise ConfigError(f"NAVCTL_CONFIG path not found: {p}")

    # XDG base dirs
    xdg_home = Path(os.environ.get("XDG_CONFIG_HOME", "~/.config")).expanduser()
    candidates = [xdg_home / "navctl" / "config.yaml"]

    xdg_dirs = os.environ.get("XDG_CONFIG_DIRS", "/etc/xdg")
    for d in xdg_dirs.split(":"):
        candidates.append(Path(d) / "navctl" / "config.yaml")

    for c in candidates:
        if c.is_file():
            return c

    raise ConfigError(
        "No config file found. Set NAVCTL_CONFIG or create ~/.config/navctl/config.yaml"
    )


def load_config(path: Optional[Path] = None) -> Config:
    cfg_path = path or resolve_config_path()
    try:
        data = yaml.safe_load(cfg_path.read_text()) or {}
    except FileNotFoundError as e:
        raise ConfigError(str(e)) from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {cfg_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config root must be a mapping: {cfg_path}")

    data = _expand_env(data)
    base_url = str(data.get("base_url") or "").strip()
    if not base_url:
        raise ConfigError(f"base_url missing from config: {cfg_path}")

    timeout = data.get("timeout")
    cfg = Config(
        base_url=base_url.rstrip("/"),
        version=int(data.get("version", 1)),
        timeout=float(timeout) if timeout is not None else None,
        cache_path=_store_path(data, "cache_path", default_cache_path()),
        credentials_path=_store_path(data, "credentials_path", default_credentials_path()),
        start_location=str(data.get("start_location") or "#/"),
        source_path=cfg_path,
    )
    return cfg
