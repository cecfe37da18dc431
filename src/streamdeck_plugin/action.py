"""Capability interface implemented by plugin actions.

Subclass :class:`Action`, set ``uuid`` to the action identifier declared in the
plugin manifest and override only the callbacks you need. Every callback
receives the decoded event and the :class:`~streamdeck_plugin.stream_deck.StreamDeck`
session handle.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from streamdeck_plugin.protocol.events import (
    AppearEvent,
    ApplicationEvent,
    DeviceDidConnectEvent,
    DeviceDidDisconnectEvent,
    DialPressEvent,
    DialRotateEvent,
    DidReceiveGlobalSettingsEvent,
    DidReceiveSettingsEvent,
    KeyEvent,
    PropertyInspectorEvent,
    SendToPluginEvent,
    SystemDidWakeUpEvent,
    TitleParametersDidChangeEvent,
    TouchTapEvent,
)

if TYPE_CHECKING:  # pragma: no cover
    from streamdeck_plugin.stream_deck import StreamDeck


class Action:
    uuid: str = ""

    def long_timeout(self) -> float:
        """Seconds a key must be held before ``on_long_press`` fires; 0 disables."""
        return 0.0

    async def on_appear(self, event: AppearEvent, sd: StreamDeck) -> None:
        pass

    async def on_disappear(self, event: AppearEvent, sd: StreamDeck) -> None:
        pass

    async def on_key_down(self, event: KeyEvent, sd: StreamDeck) -> None:
        pass

    async def on_key_up(self, event: KeyEvent, sd: StreamDeck) -> None:
        pass

    async def on_long_press(self, event: KeyEvent, timeout: float, sd: StreamDeck) -> None:
        pass

    # settings
    async def on_settings_changed(self, event: DidReceiveSettingsEvent, sd: StreamDeck) -> None:
        pass

    async def on_global_settings_changed(self, event: DidReceiveGlobalSettingsEvent, sd: StreamDeck) -> None:
        pass

    # encoders
    async def on_dial_rotate(self, event: DialRotateEvent, sd: StreamDeck) -> None:
        pass

    async def on_dial_press(self, event: DialPressEvent, sd: StreamDeck) -> None:
        pass

    async def on_touch_tap(self, event: TouchTapEvent, sd: StreamDeck) -> None:
        pass

    async def on_title_parameters_changed(self, event: TitleParametersDidChangeEvent, sd: StreamDeck) -> None:
        pass

    # lifecycle
    async def on_device_connect(self, event: DeviceDidConnectEvent, sd: StreamDeck) -> None:
        pass

    async def on_device_disconnect(self, event: DeviceDidDisconnectEvent, sd: StreamDeck) -> None:
        pass

    async def on_application_launch(self, event: ApplicationEvent, sd: StreamDeck) -> None:
        pass

    async def on_application_terminate(self, event: ApplicationEvent, sd: StreamDeck) -> None:
        pass

    async def on_system_wake_up(self, event: SystemDidWakeUpEvent, sd: StreamDeck) -> None:
        pass

    async def on_property_inspector_appear(self, event: PropertyInspectorEvent, sd: StreamDeck) -> None:
        pass

    async def on_property_inspector_disappear(self, event: PropertyInspectorEvent, sd: StreamDeck) -> None:
        pass

    async def on_send_to_plugin(self, event: SendToPluginEvent, sd: StreamDeck) -> None:
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}(uuid={self.uuid!r})"
