"""
geocoin.worldgen
----------------

Procedural side of the world: seeded luck draws, the cache spawn rule and
the game configuration that parameterizes both.

Public API:
    from geocoin.worldgen import CacheSpawner, luck, load_game_cfg
"""

from .config import DEFAULT_GAME_CFG, load_game_cfg
from .luck import luck
from .spawner import CacheSpawner
