# app_meta.py
from __future__ import annotations

from importlib import metadata

APP_NAME = "pulse-switcher"


def detect_version() -> str:
    try:
        return metadata.version(APP_NAME)
    except metadata.PackageNotFoundError:
        return "0.0.0"
