from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

from backend.kv_store import _config as store_config


LOG_FORMATS = {"json", "plain"}


@dataclass(frozen=True)
class WheelSettings:
    spin_duration_ms: int
    extra_full_spins: int


def _require_positive_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw_value = env.get(name, str(default)).strip()
    try:
        parsed = int(raw_value)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be an integer.") from exc
    if parsed <= 0:
        raise RuntimeError(f"{name} must be a positive integer.")
    return parsed


def wheel_settings(env: Mapping[str, str] | None = None) -> WheelSettings:
    active_env = os.environ if env is None else env
    return WheelSettings(
        spin_duration_ms=_require_positive_int(active_env, "WHEEL_SPIN_DURATION_MS", 4000),
        extra_full_spins=_require_positive_int(active_env, "WHEEL_EXTRA_FULL_SPINS", 5),
    )


def log_format(env: Mapping[str, str] | None = None) -> str:
    active_env = os.environ if env is None else env
    return active_env.get("WHEEL_LOG_FORMAT", "json").strip().lower() or "json"


def validate_runtime_environment(mode: str, env: Mapping[str, str] | None = None) -> None:
    active_env = os.environ if env is None else env

    errors: list[str] = []

    try:
        store_config(active_env)
    except RuntimeError as exc:
        errors.append(str(exc))

    for env_name, default in (
        ("WHEEL_SPIN_DURATION_MS", 4000),
        ("WHEEL_EXTRA_FULL_SPINS", 5),
    ):
        try:
            _require_positive_int(active_env, env_name, default)
        except RuntimeError as exc:
            errors.append(str(exc))

    if log_format(active_env) not in LOG_FORMATS:
        errors.append("WHEEL_LOG_FORMAT must be either 'json' or 'plain'.")

    if errors:
        error_lines = "\n- ".join(errors)
        raise RuntimeError(f"Invalid runtime environment for {mode}:\n- {error_lines}")
