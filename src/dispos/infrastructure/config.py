"""Runtime settings, read from the environment."""

from __future__ import annotations

import os
from pathlib import Path

# When installed in editable mode the project root is the repo root.
_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"


class Settings:

    def __init__(self) -> None:
        raw_dir = os.getenv("DISPOS_DATA_DIR", "").strip()
        self.data_dir = Path(raw_dir) if raw_dir else _DEFAULT_DATA_DIR
        self.log_level = os.getenv("DISPOS_LOG_LEVEL", "INFO").strip().upper() or "INFO"
        self.currency = os.getenv("DISPOS_CURRENCY", "THB").strip().upper() or "THB"
        self.checkout_attempts = _int_env("DISPOS_CHECKOUT_ATTEMPTS", 3)
        self.retry_base_delay = _float_env("DISPOS_RETRY_BASE_DELAY", 1.0)


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value < 1:
        raise ValueError(f"{name} must be at least 1, got {value}")
    return value


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None
    if value < 0:
        raise ValueError(f"{name} cannot be negative, got {value}")
    return value
