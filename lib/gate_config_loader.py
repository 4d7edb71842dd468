from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

import yaml

from lib.env import load_env
from schemas.gate_config import GateConfig


DEFAULT_GATE_CONFIG_PATH = Path("config/audit_gate.yaml")
GATE_CONFIG_ENV_VAR = "AUDIT_GATE_CONFIG"


def resolve_gate_config_path(path: Optional[Path] = None) -> tuple[Path, bool]:
    """
    Returns (path, explicit). Explicit paths must exist; the default may be absent.
    """
    if path is not None:
        return Path(path), True

    load_env()
    env_value = os.environ.get(GATE_CONFIG_ENV_VAR, "").strip()
    if env_value:
        return Path(env_value), True

    return DEFAULT_GATE_CONFIG_PATH, False


def load_gate_config(path: Optional[Path] = None) -> GateConfig:
    """
    Loads and validates the audit gate constants.
    """
    p, explicit = resolve_gate_config_path(path)
    if not p.exists():
        if explicit:
            raise FileNotFoundError(f"Audit gate config file not found: {p}")
        return GateConfig()

    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Malformed YAML in audit gate config {p}: {e}") from e

    return GateConfig.model_validate(raw)
