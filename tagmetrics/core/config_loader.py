import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

_BASE_DIR = Path(__file__).resolve().parents[2]

CONFIG_ENV_VAR = "TAGMETRICS_CONFIG"


def get_base_dir() -> Path:
    return _BASE_DIR


def _safe_load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    return data if isinstance(data, dict) else {}


def _merge_dicts(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged: Dict[str, Any] = dict(base)
    for key, value in override.items():
        if (
            key in merged
            and isinstance(merged[key], dict)
            and isinstance(value, dict)
        ):
            merged[key] = _merge_dicts(merged[key], value)
        else:
            merged[key] = value
    return merged


def _resolve_base_path(path: Optional[Path]) -> Path:
    if path is not None:
        return Path(path)
    env_path = os.getenv(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    return _BASE_DIR / "config" / "config.yaml"


def load_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load the YAML config and fill in defaults for the logging and metrics
    blocks without touching keys that are already set. A ``config.local.yaml``
    next to the base file is merged over it.
    """

    base_config_path = _resolve_base_path(path)
    local_config_path = base_config_path.with_name("config.local.yaml")

    base_data = _safe_load_yaml(base_config_path)
    local_data = _safe_load_yaml(local_config_path)
    data = _merge_dicts(base_data, local_data)

    logging_defaults: Dict[str, Any] = {
        "level": "INFO",
        "file": "logs/tagmetrics.log",
        "max_bytes": 10 * 1024 * 1024,
        "backup_count": 5,
    }

    logging_cfg = data.get("logging")
    if not isinstance(logging_cfg, dict):
        logging_cfg = {}
        data["logging"] = logging_cfg

    for k, v in logging_defaults.items():
        logging_cfg.setdefault(k, v)

    if not isinstance(data.get("metrics"), list):
        data["metrics"] = []

    return data
