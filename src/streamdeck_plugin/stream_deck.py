"""Session handle given to every action callback."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import fields, is_dataclass
from typing import Any, Dict, List, Mapping, Optional, Type, TypeVar

from streamdeck_plugin.config import PluginArgs
from streamdeck_plugin.protocol.commands import (
    ActionState,
    Command,
    Target,
    build_get_global_settings,
    build_get_settings,
    build_log_message,
    build_open_url,
    build_registration,
    build_send_to_property_inspector,
    build_set_feedback,
    build_set_feedback_layout,
    build_set_global_settings,
    build_set_image,
    build_set_settings,
    build_set_state,
    build_set_title,
    build_show_alert,
    build_show_ok,
    build_switch_to_profile,
    settings_to_dict,
)
from streamdeck_plugin.runtime.outbox import Outbox
from streamdeck_plugin.runtime.session_state import SessionStateStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


def deserialize_settings(raw: Mapping[str, Any], model: Optional[Type[T]]) -> Any:
    """Build *model* from a settings mapping; ``None`` when it does not fit.

    Dataclass models ignore keys they do not declare. Without a model the raw
    mapping is returned.
    """

    if model is None:
        return dict(raw)
    data = dict(raw)
    if is_dataclass(model):
        names = {f.name for f in fields(model)}
        data = {k: v for k, v in data.items() if k in names}
    try:
        return model(**data)
    except (TypeError, ValueError) as exc:
        logger.debug("settings do not fit %s: %s", getattr(model, "__name__", model), exc)
        return None


class StreamDeck:
    """Read-only session queries plus one call per outbound command."""

    def __init__(
        self,
        args: PluginArgs,
        outbox: Outbox,
        state: Optional[SessionStateStore] = None,
        external: Optional[asyncio.Queue[str]] = None,
    ) -> None:
        self.args = args
        self.state = state if state is not None else SessionStateStore()
        self._outbox = outbox
        self._external = external

    @property
    def plugin_uuid(self) -> str:
        return self.args.plugin_uuid

    async def send(self, command: Command) -> None:
        await self._outbox.send(command.to_json())

    async def register(self) -> None:
        """Registration handshake followed by a global-settings request."""

        await self.send(build_registration(self.args.register_event, self.plugin_uuid))
        await self.send(build_get_global_settings(self.plugin_uuid))

    # --- queries ------------------------------------------------------------
    async def settings(self, context: str, model: Optional[Type[T]] = None) -> Any:
        raw = await self.state.instance_settings(context)
        if raw is None:
            return None
        return deserialize_settings(raw, model)

    async def global_settings(self, model: Optional[Type[T]] = None) -> Any:
        return deserialize_settings(await self.state.global_settings(), model)

    async def contexts_of(self, uuid: str) -> List[str]:
        return await self.state.contexts_of(uuid)

    async def external(self, data: str) -> None:
        if self._external is None:
            raise RuntimeError("no external channel was configured for this plugin")
        await self._external.put(data)

    # --- settings -----------------------------------------------------------
    async def set_settings(self, context: str, settings: Any) -> None:
        payload = settings_to_dict(settings)
        await self.state.set_instance_settings(context, payload)
        await self.send(build_set_settings(context, payload))
        await self.send(build_get_settings(context))

    async def get_settings(self, context: str) -> None:
        await self.send(build_get_settings(context))

    async def update_global_settings(self, settings: Mapping[str, Any], mirror: bool = False) -> Dict[str, Any]:
        merged = await self.state.merge_global_settings(settings)
        if mirror:
            await self.set_global_settings(merged)
        return merged

    async def set_global_settings(self, settings: Any) -> None:
        await self.send(build_set_global_settings(self.plugin_uuid, settings))
        await self.send(build_get_global_settings(self.plugin_uuid))

    async def get_global_settings(self) -> None:
        await self.send(build_get_global_settings(self.plugin_uuid))

    # --- visuals ------------------------------------------------------------
    async def set_title(
        self,
        context: str,
        title: Optional[str],
        target: Optional[Target] = None,
        state: Optional[ActionState] = None,
    ) -> None:
        logger.debug("set_title %s: %r", context, title)
        await self.send(build_set_title(context, title, target=target, state=state))

    async def set_image(
        self,
        context: str,
        image: Optional[str],
        target: Optional[Target] = None,
        state: Optional[ActionState] = None,
    ) -> None:
        await self.send(build_set_image(context, image, target=target, state=state))

    async def set_state(self, context: str, state: int) -> None:
        await self.send(build_set_state(context, state))

    async def set_feedback(self, context: str, payload: Mapping[str, Any]) -> None:
        await self.send(build_set_feedback(context, payload))

    async def set_feedback_layout(self, context: str, layout: str) -> None:
        await self.send(build_set_feedback_layout(context, layout))

    async def show_ok(self, context: str) -> None:
        await self.send(build_show_ok(context))

    async def show_alert(self, context: str) -> None:
        await self.send(build_show_alert(context))

    # --- misc ---------------------------------------------------------------
    async def switch_to_profile(self, device: str, profile: str) -> None:
        await self.send(build_switch_to_profile(self.plugin_uuid, device, profile))

    async def send_to_property_inspector(self, action: str, context: str, payload: Mapping[str, Any]) -> None:
        await self.send(build_send_to_property_inspector(action, context, payload))

    async def log(self, message: str) -> None:
        await self.send(build_log_message(message))

    async def open_url(self, url: str) -> None:
        await self.send(build_open_url(url))
