"""
Environment-variable readers shared by all feature packages.

Each feature keeps its own small accessor functions (e.g. `jwt_secret()`)
that call these helpers, so values are read at call time and tests can
override them with `monkeypatch.setenv`.
"""

from __future__ import annotations

import os


def env_str(name: str, default: str = "") -> str:
    return os.environ.get(name, "").strip() or default


def env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def env_list(name: str, default: list[str] | None = None) -> list[str]:
    """
    Comma-separated list; blanks are dropped.
    """
    raw = os.environ.get(name, "").strip()
    if not raw:
        return list(default or [])
    return [item.strip() for item in raw.split(",") if item.strip()]
