"""Configuration loading for the responder service.

Layered configuration:
1. Explicit path argument (highest precedence)
2. Environment variable PULSE_AGENT_CONFIG
3. Fallback to "config/default.yaml"

Values can be overridden from environment variables with prefix
``PULSE_AGENT__`` (e.g., PULSE_AGENT__TYPING__MAX_MS=900).
"""

from __future__ import annotations

import copy
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .session import SessionRegistry, TypingPolicy

logger = logging.getLogger("pulse_agent.config")

ENV_PATH_VAR = "PULSE_AGENT_CONFIG"
ENV_PREFIX = "PULSE_AGENT__"
DEFAULT_PATH = "config/default.yaml"

DEFAULTS: Dict[str, Any] = {
    "agent": {"name": "PulsePilot"},
    "typing": {"per_char_ms": 18, "min_ms": 640, "max_ms": 1600},
    "sessions": {"max_sessions": 500},
    "server": {"cors_origins": ["*"]},
    "logging": {"level": "INFO"},
}


def _coerce(value: str) -> Any:
    if value.lower() in {"true", "false"}:
        return value.lower() == "true"
    try:
        if "." in value:
            return float(value)
        return int(value)
    except ValueError:
        return value


def _apply_env_overrides(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """Apply environment variable overrides with prefix PULSE_AGENT__."""
    for key, value in os.environ.items():
        if not key.startswith(ENV_PREFIX):
            continue
        # e.g., PULSE_AGENT__TYPING__MAX_MS -> cfg["typing"]["max_ms"]
        parts = key[len(ENV_PREFIX):].lower().split("__")
        sub = cfg
        for p in parts[:-1]:
            if p not in sub or not isinstance(sub[p], dict):
                sub[p] = {}
            sub = sub[p]
        sub[parts[-1]] = _coerce(value)
    return cfg


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    out = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(out.get(key), dict):
            out[key] = _merge(out[key], value)
        else:
            out[key] = value
    return out


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Load YAML configuration for the responder.

    Parameters
    ----------
    path : str | None
        Optional path to a configuration file. If not provided, the
        environment variable ``PULSE_AGENT_CONFIG`` is consulted. As a
        last resort ``config/default.yaml`` is used.

    Returns
    -------
    Dict[str, Any]
        Defaults, overlaid with the file contents, with environment
        overrides applied last.
    """
    if path is None:
        path = os.environ.get(ENV_PATH_VAR, DEFAULT_PATH)

    path_obj = Path(path)
    if not path_obj.exists():
        logger.warning("Config file not found at %s. Using defaults.", path_obj)
        return _apply_env_overrides(copy.deepcopy(DEFAULTS))

    with path_obj.open("r", encoding="utf-8") as f:
        try:
            loaded = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise RuntimeError(f"Failed to parse config file {path_obj}: {e}")

    if not isinstance(loaded, dict):
        raise RuntimeError(f"Invalid config format in {path_obj}, expected dict.")

    return _apply_env_overrides(_merge(DEFAULTS, loaded))


# -----------------------------
# Builders
# -----------------------------
def typing_policy_from(cfg: Dict[str, Any]) -> TypingPolicy:
    typing_cfg = cfg.get("typing", {}) or {}
    return TypingPolicy(
        per_char_ms=int(typing_cfg.get("per_char_ms", 18)),
        min_ms=int(typing_cfg.get("min_ms", 640)),
        max_ms=int(typing_cfg.get("max_ms", 1600)),
    )


def registry_from(cfg: Dict[str, Any]) -> SessionRegistry:
    max_sessions = (cfg.get("sessions", {}) or {}).get("max_sessions")
    return SessionRegistry(
        max_sessions=int(max_sessions) if max_sessions else None,
        typing=typing_policy_from(cfg),
    )


def configure_logging(cfg: Dict[str, Any]) -> None:
    level_name = str((cfg.get("logging", {}) or {}).get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)
    if not logging.getLogger().handlers:
        logging.basicConfig(level=level, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    logging.getLogger("pulse_agent").setLevel(level)
