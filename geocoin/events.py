# geocoin/events.py
"""
Tiny synchronous publish/subscribe hub.

The core announces what changed; presentation code (the console UI, or any
map renderer) subscribes and redraws. Handlers run inline, in subscription
order, before emit() returns.

Event names and payloads:
    cache_activated     cell, cache
    cache_deactivated   cell
    window_changed      entered, left
    cache_mutated       cell, coin_count
    inventory_changed   coin_count
    player_moved        position, cell
    persistence_error   error
    game_reset
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Callable, Dict, List

logger = logging.getLogger(__name__)

Handler = Callable[..., None]


class EventBus:
    def __init__(self) -> None:
        self._handlers: Dict[str, List[Handler]] = defaultdict(list)

    def subscribe(self, name: str, handler: Handler) -> None:
        if handler not in self._handlers[name]:
            self._handlers[name].append(handler)

    def unsubscribe(self, name: str, handler: Handler) -> None:
        try:
            self._handlers[name].remove(handler)
        except ValueError:
            pass

    def emit(self, name: str, **payload) -> None:
        logger.debug("event %s %s", name, sorted(payload))
        for handler in list(self._handlers.get(name, ())):
            handler(**payload)
