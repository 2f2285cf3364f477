# geocoin/errors.py
"""
Exception types shared across the package.

Everything derives from GeocoinError so the console driver can catch a
single base class around a command and keep the session alive.
"""


class GeocoinError(Exception):
    """Base class for all geocoin errors."""


class EmptyCache(GeocoinError):
    """Raised by Cache.collect() when the cache holds no coins."""

    def __init__(self, cell) -> None:
        super().__init__(f"cache at {cell.i},{cell.j} is empty")
        self.cell = cell


class DuplicateCoin(GeocoinError):
    """Raised when a coin id is already present in the target cache."""

    def __init__(self, coin_id: str) -> None:
        super().__init__(f"coin {coin_id} is already in this cache")
        self.coin_id = coin_id


class CoinNotHeld(GeocoinError):
    """Raised when the player tries to deposit a coin they do not hold."""

    def __init__(self, coin_id: str) -> None:
        super().__init__(f"coin {coin_id} is not in the inventory")
        self.coin_id = coin_id


class InvalidCoinId(GeocoinError, ValueError):
    """A coin id string or coin record could not be parsed."""


class RecordNotFound(GeocoinError, LookupError):
    """No persisted record exists under the requested key."""


class CorruptRecord(GeocoinError, ValueError):
    """A persisted record exists but cannot be decoded."""


class PersistenceError(GeocoinError):
    """The key-value store failed to write or delete."""

    def __init__(self, message: str, keys=None) -> None:
        super().__init__(message)
        self.keys = list(keys or [])


class ResetError(PersistenceError):
    """A full reset could not be completed; the store was rolled back."""


class NoCacheHere(GeocoinError, LookupError):
    """The cell has no active cache (out of view, or none was ever there)."""

    def __init__(self, cell) -> None:
        super().__init__(f"no cache in view at {cell.i},{cell.j}")
        self.cell = cell
