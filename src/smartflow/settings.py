from __future__ import annotations

import os

from smartflow.errors import ConfigError

DEFAULT_DATA_DIR = "data"
DEFAULT_LOG_LEVEL = "warning"
DEFAULT_HTTP_TIMEOUT = 30.0
DEFAULT_USER_AGENT = "smartflow/0.1"


def data_dir() -> str:
    return os.getenv("SMARTFLOW_DATA_DIR") or DEFAULT_DATA_DIR


def log_level() -> str:
    return os.getenv("SMARTFLOW_LOG_LEVEL") or DEFAULT_LOG_LEVEL


def http_timeout() -> float:
    raw = os.getenv("SMARTFLOW_HTTP_TIMEOUT")
    if not raw:
        return DEFAULT_HTTP_TIMEOUT
    try:
        return float(raw)
    except ValueError:
        raise ConfigError(f"SMARTFLOW_HTTP_TIMEOUT must be a number, got {raw!r}")


def user_agent() -> str:
    return os.getenv("SMARTFLOW_USER_AGENT") or DEFAULT_USER_AGENT
