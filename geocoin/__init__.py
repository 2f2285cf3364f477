"""
geocoin
-------

A location-based coin collecting game: a lattice of world cells, some of
which hold caches of individually numbered coins. Caches are generated
deterministically from their cell, and whatever the player collects or
deposits is saved and wins over regeneration.

Public API:
    from geocoin.game import Game
"""

__version__ = "0.1.0"
