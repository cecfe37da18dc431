from __future__ import annotations

import logging
from typing import Dict, Iterator, Optional

from streamdeck_plugin.action import Action
from streamdeck_plugin.errors import ActionNotFoundError, RegistryFrozenError

logger = logging.getLogger(__name__)

# Actions registered under this UUID also observe every ``sendToPlugin`` event.
SHARED_ACTION_UUID = "*"


class ActionManager:
    """Registry of actions keyed by UUID.

    Built up with chained :meth:`register` calls, then frozen by the runtime
    before the first frame is dispatched.
    """

    def __init__(self) -> None:
        self._actions: Dict[str, Action] = {}
        self._frozen = False

    def register(self, action: Action, uuid: Optional[str] = None) -> "ActionManager":
        if self._frozen:
            raise RegistryFrozenError("cannot register actions after the plugin has started")
        key = str(uuid if uuid is not None else action.uuid)
        if not key:
            raise ValueError(f"{action!r} has no uuid")
        if key in self._actions:
            logger.warning("action %s re-registered; replacing %r with %r", key, self._actions[key], action)
        self._actions[key] = action
        return self

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get(self, uuid: str) -> Action:
        try:
            return self._actions[uuid]
        except KeyError:
            raise ActionNotFoundError(uuid) from None

    def shared(self) -> Optional[Action]:
        return self._actions.get(SHARED_ACTION_UUID)

    def actions(self) -> Iterator[Action]:
        return iter(list(self._actions.values()))

    def __iter__(self) -> Iterator[Action]:
        return self.actions()

    def __contains__(self, uuid: object) -> bool:
        return uuid in self._actions

    def __len__(self) -> int:
        return len(self._actions)
