# geocoin/utils.py
# -----------------------------------------------------------------------------
# Path and JSON helpers shared by the config loader and the file store.
#   • get_package_root() lets modules resolve paths regardless of cwd
#   • data_path() points under geocoin/data/ (config, saves)
#   • All file IO uses UTF-8 and os.path for portability
# -----------------------------------------------------------------------------

from __future__ import annotations

import json
import logging
import os
from typing import Any

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Path helpers
# -----------------------------------------------------------------------------
def get_package_root() -> str:
    """Return the absolute path to the geocoin package directory."""
    return os.path.dirname(os.path.abspath(__file__))


def data_path(*parts: str) -> str:
    """Join parts under geocoin/data in a cross-platform way."""
    return os.path.join(get_package_root(), "data", *parts)


def save_path(save_name: str) -> str:
    return data_path("saves", f"{save_name}.json")


def ensure_dir(path: str) -> None:
    """Create a directory if it doesn't already exist."""
    os.makedirs(path, exist_ok=True)


# -----------------------------------------------------------------------------
# JSON helpers
# -----------------------------------------------------------------------------
def read_json(path: str, default: Any = None) -> Any:
    """Read JSON with UTF-8 encoding; return default on any error."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError:
        return default
    except (OSError, ValueError) as e:
        logger.warning(f"Failed to read JSON {path}: {e}. Using default.")
        return default


def write_json(path: str, data: Any) -> None:
    """
    Write JSON with UTF-8 encoding; create parent dir as needed.

    The payload goes to a sibling temp file first and is then moved into
    place, so a crash mid-write never leaves a truncated save behind.
    """
    ensure_dir(os.path.dirname(path) or ".")
    tmp_path = f"{path}.tmp"
    with open(tmp_path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, sort_keys=True)
    os.replace(tmp_path, path)
