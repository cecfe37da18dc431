"""Per-session cache of instance settings, global settings and visibility."""

from __future__ import annotations

import asyncio
import copy
import logging
from typing import Any, Dict, List, Mapping, Optional

logger = logging.getLogger(__name__)

Settings = Dict[str, Any]


class SessionStateStore:
    """Async-safe store owned by one plugin session.

    Callers only ever receive copies; the underlying maps never leave the
    store. Every method holds the lock for a single read-modify-write.
    """

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._instance_settings: Dict[str, Settings] = {}
        self._global_settings: Settings = {}
        self._visible: Dict[str, List[str]] = {}
        self._owner: Dict[str, str] = {}

    # ------------------------------------------------------------------
    async def set_instance_settings(self, context: str, settings: Mapping[str, Any]) -> None:
        """Replace the whole settings blob for *context*."""

        snapshot = copy.deepcopy(dict(settings))
        async with self._lock:
            self._instance_settings[context] = snapshot

    async def instance_settings(self, context: str) -> Optional[Settings]:
        async with self._lock:
            settings = self._instance_settings.get(context)
            return copy.deepcopy(settings) if settings is not None else None

    async def merge_global_settings(self, update: Mapping[str, Any]) -> Settings:
        """Field-level merge of *update* into the global settings; returns the result."""

        update_copy = copy.deepcopy(dict(update))
        async with self._lock:
            self._global_settings.update(update_copy)
            return copy.deepcopy(self._global_settings)

    async def global_settings(self) -> Settings:
        async with self._lock:
            return copy.deepcopy(self._global_settings)

    # ------------------------------------------------------------------
    async def mark_visible(self, action: str, context: str) -> None:
        async with self._lock:
            previous = self._owner.get(context)
            if previous is not None:
                contexts = self._visible.get(previous, [])
                if context in contexts:
                    contexts.remove(context)
                if previous != action:
                    logger.debug("context %s moved from %s to %s", context, previous, action)
            self._visible.setdefault(action, []).append(context)
            self._owner[context] = action

    async def mark_hidden(self, context: str) -> Optional[str]:
        """Drop *context* from the visibility index; returns the action it belonged to."""

        async with self._lock:
            owner = self._owner.pop(context, None)
            if owner is not None:
                contexts = self._visible.get(owner, [])
                if context in contexts:
                    contexts.remove(context)
            return owner

    async def contexts_of(self, action: str) -> List[str]:
        async with self._lock:
            return list(self._visible.get(action, ()))

    async def owner_of(self, context: str) -> Optional[str]:
        async with self._lock:
            return self._owner.get(context)

    def dump_debug(self) -> Dict[str, Any]:
        return {
            "instances": sorted(self._instance_settings),
            "global_keys": sorted(self._global_settings),
            "visible": {action: list(contexts) for action, contexts in self._visible.items()},
        }
