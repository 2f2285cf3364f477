"""
Game configuration loader.

Reads geocoin/data/geocoin.json if present, otherwise uses sane defaults.
Keys found in the file override the defaults one by one, so a partial file
is fine. This drives the tile size, window radius, spawn odds and coin range.
"""

import copy
import json
import logging

from ..utils import data_path

logger = logging.getLogger(__name__)

DEFAULT_GAME_CFG = {
    "tile_width": 1e-4,
    "neighborhood_size": 8,
    "cache_spawn_probability": 0.1,
    "min_coins": 1,
    "max_coins": 100,
    "seed": "geocoin",
    "start": {
        "lat": 36.98949379578401,
        "lng": -122.06277128548504,
    },
    "save_name": "default",
}


def _read_json(path: str, default):
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError:
        logger.info(f"game config not found at {path}, using defaults.")
    except Exception as e:
        logger.error(f"Error reading {path}: {e}")
    return default


def merge_cfg(overrides: dict) -> dict:
    cfg = copy.deepcopy(DEFAULT_GAME_CFG)
    if not isinstance(overrides, dict):
        logger.warning("game config is not a JSON object; ignoring it.")
        return cfg
    for key, value in overrides.items():
        if key not in cfg:
            logger.warning(f"Unknown game config key '{key}' ignored.")
            continue
        if isinstance(cfg[key], dict) and isinstance(value, dict):
            cfg[key].update(value)
        else:
            cfg[key] = value
    return cfg


def load_game_cfg(path: str = None) -> dict:
    return merge_cfg(_read_json(path or data_path("geocoin.json"), {}))
