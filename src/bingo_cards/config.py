from __future__ import annotations

import hashlib
import json
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Tuple

import yaml


ENV_PREFIX = "BINGO_CARDS_"

PATH_KEYS = ("out_dir", "log_file")
INT_KEYS = {"count", "seed.value", "max_attempts"}


def _read_config_file(config_path: Path | None) -> Dict[str, Any]:
    if not config_path:
        return {}
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")
    suffix = config_path.suffix.lower()
    text = config_path.read_text(encoding="utf-8")
    if suffix in (".yaml", ".yml"):
        data = yaml.safe_load(text) or {}
        if not isinstance(data, dict):
            raise ValueError("Top-level YAML config must be a mapping")
        return data
    if suffix == ".json":
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError("Top-level JSON config must be a mapping")
        return data
    raise ValueError(f"Unsupported config extension: {suffix}")


def _collect_env_vars(env: Mapping[str, str]) -> Dict[str, Any]:
    """Map ENV variables with BINGO_CARDS_ prefix to config keys."""
    mapping: Dict[str, str] = {
        f"{ENV_PREFIX}COUNT": "count",
        f"{ENV_PREFIX}EVENT_HEADER": "event_header",
        f"{ENV_PREFIX}SEED_VALUE": "seed.value",
        f"{ENV_PREFIX}SEED_ENGINE": "seed.engine",
        f"{ENV_PREFIX}MAX_ATTEMPTS": "max_attempts",
        f"{ENV_PREFIX}OUT_DIR": "out_dir",
        f"{ENV_PREFIX}LOG_LEVEL": "log_level",
        f"{ENV_PREFIX}LOG_FILE": "log_file",
    }

    result: Dict[str, Any] = {}
    for env_key, cfg_key in mapping.items():
        if env_key not in env:
            continue
        raw = env[env_key]
        if cfg_key in INT_KEYS:
            try:
                result[cfg_key] = int(raw)
            except ValueError:
                result[cfg_key] = raw
        else:
            result[cfg_key] = raw
    return result


def _set_nested(config: Dict[str, Any], dotted_key: str, value: Any) -> None:
    parts = dotted_key.split(".")
    cursor = config
    for part in parts[:-1]:
        if part not in cursor or not isinstance(cursor[part], dict):
            cursor[part] = {}
        cursor = cursor[part]
    cursor[parts[-1]] = value


def _apply_overrides(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    merged: Dict[str, Any] = json.loads(json.dumps(base))  # deep copy via JSON
    for key, value in overrides.items():
        if "." in key:
            _set_nested(merged, key, value)
        elif isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _apply_overrides(merged[key], value)
        else:
            merged[key] = value
    return merged


def canonical_json_dumps(data: Any) -> str:
    return json.dumps(data, ensure_ascii=True, sort_keys=True, separators=(",", ":"))


def compute_params_hash(resolved: Mapping[str, Any]) -> str:
    """Hash of the settings that decide which cards come out."""
    seed = resolved.get("seed") or {}
    contract = {
        "count": resolved.get("count"),
        "max_attempts": resolved.get("max_attempts"),
        "seed.engine": seed.get("engine"),
        "seed.value": seed.get("value"),
    }
    contract = {k: v for k, v in contract.items() if v is not None}
    digest = hashlib.sha256(canonical_json_dumps(contract).encode("utf-8")).hexdigest()
    return f"sha256:{digest}"


def resolve_paths(
    resolved: Dict[str, Any],
    config_file: Path | None,
    cli_overrides: Dict[str, Any],
) -> Dict[str, Any]:
    """Normalize paths per policy.

    - Paths from config file: resolve relative to config directory
    - Paths from CLI: resolve relative to CWD
    """
    cwd = Path.cwd()
    cfg_dir = config_file.parent if config_file else None

    def normalize(path_value: str | None, is_cli: bool) -> str | None:
        if path_value is None or path_value == "":
            return None
        p = Path(path_value)
        if p.is_absolute():
            return str(p)
        base = cwd if is_cli else (cfg_dir or cwd)
        return str((base / p).resolve())

    result = dict(resolved)
    cli_keys = {k for k in cli_overrides if k in PATH_KEYS}
    for key in PATH_KEYS:
        value = resolved.get(key)
        if value is None:
            continue
        result[key] = normalize(str(value), key in cli_keys)
    return result


def resolve_parameters(
    *,
    config_path_str: str | None,
    cli_overrides: Dict[str, Any],
    env: Mapping[str, str] | None = None,
) -> Tuple[Dict[str, Any], str, Path | None]:
    """Resolve parameters with precedence CLI > ENV > config > defaults.

    Returns (resolved_params, params_hash, config_path)
    """
    config_path = Path(config_path_str).resolve() if config_path_str else None
    file_cfg = _read_config_file(config_path) if config_path else {}
    env_map = _collect_env_vars(os.environ if env is None else env)

    defaults: Dict[str, Any] = {
        "count": 0,
        "event_header": "bingo",
        "max_attempts": 100,
        "log_level": "INFO",
        "seed": {"engine": "py_random", "value": None},
    }

    merged = _apply_overrides(defaults, file_cfg)
    merged = _apply_overrides(merged, env_map)
    merged = _apply_overrides(merged, cli_overrides)

    merged = resolve_paths(merged, config_path, cli_overrides)

    params_hash = compute_params_hash(merged)
    return merged, params_hash, config_path
