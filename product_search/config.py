"""
product_search/config.py

Application-level configuration helpers.

Every scraper and API setting is read from the process environment after
the project's `.env` files have been merged in.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import TypeVar

T = TypeVar("T")

ENV_FILENAMES = (".env", ".env.local")


def _project_root() -> Path:
    return Path(__file__).resolve().parents[1]


def parse_env_line(raw_line: str) -> tuple[str, str] | None:
    """
    Split one `.env` line into key and value; comments and junk yield None.
    """

    line = raw_line.strip()
    if line.startswith("export "):
        line = line[len("export "):].lstrip()
    if not line or line.startswith("#") or "=" not in line:
        return None

    key, value = line.split("=", 1)
    key = key.strip()
    if not key:
        return None
    return key, value.strip().strip('"').strip("'")


def load_env_files(root: Path | None = None) -> None:
    """
    Merge `.env` then `.env.local` into the environment without overriding it.
    """

    base = root or _project_root()
    for filename in ENV_FILENAMES:
        env_path = base / filename
        if not env_path.is_file():
            continue
        for raw_line in env_path.read_text(encoding="utf-8").splitlines():
            parsed = parse_env_line(raw_line)
            if parsed is not None:
                os.environ.setdefault(*parsed)


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    load_env_files()


def _read_env(name: str) -> str | None:
    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return None
    return value.strip() or None


def _parse_env(name: str, parser: Callable[[str], T], default: T) -> T:
    raw_value = _read_env(name)
    if raw_value is None:
        return default
    try:
        return parser(raw_value)
    except ValueError:
        return default


def get_int_env(name: str, default: int) -> int:
    return _parse_env(name, int, default)


def get_float_env(name: str, default: float) -> float:
    return _parse_env(name, float, default)


def get_str_env(name: str, default: str) -> str:
    """
    Read a string setting; blank values count as unset.
    """

    return _read_env(name) or default


def get_optional_str_env(name: str) -> str | None:
    return _read_env(name)


@dataclass(frozen=True)
class AppSettings:
    """
    Process-level settings for the API.
    """

    title: str = "Product Search Scraper API"
    version: str = "1.0.0"
    log_level: str = "INFO"


@lru_cache(maxsize=1)
def get_app_settings() -> AppSettings:
    return AppSettings(
        title=get_str_env("APP_TITLE", "Product Search Scraper API"),
        version=get_str_env("APP_VERSION", "1.0.0"),
        log_level=get_str_env("LOG_LEVEL", "INFO").upper(),
    )
