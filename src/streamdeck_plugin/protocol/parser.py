"""Decode inbound text frames into typed events."""

from __future__ import annotations

import json
from typing import Any, Callable, Dict, Mapping

from streamdeck_plugin.errors import DecodeError, UnknownEventError

from .events import (
    APPLICATION_DID_LAUNCH,
    APPLICATION_DID_TERMINATE,
    DEVICE_DID_CONNECT,
    DEVICE_DID_DISCONNECT,
    DIAL_PRESS,
    DIAL_ROTATE,
    DID_RECEIVE_GLOBAL_SETTINGS,
    DID_RECEIVE_SETTINGS,
    KEY_DOWN,
    KEY_UP,
    PROPERTY_INSPECTOR_DID_APPEAR,
    PROPERTY_INSPECTOR_DID_DISAPPEAR,
    SEND_TO_PLUGIN,
    SYSTEM_DID_WAKE_UP,
    TITLE_PARAMETERS_DID_CHANGE,
    TOUCH_TAP,
    WILL_APPEAR,
    WILL_DISAPPEAR,
    AppearEvent,
    ApplicationEvent,
    DeviceDidConnectEvent,
    DeviceDidDisconnectEvent,
    DialPressEvent,
    DialRotateEvent,
    DidReceiveGlobalSettingsEvent,
    DidReceiveSettingsEvent,
    InputEvent,
    KeyEvent,
    PropertyInspectorEvent,
    SendToPluginEvent,
    SystemDidWakeUpEvent,
    TitleParametersDidChangeEvent,
    TouchTapEvent,
)

_DECODERS: Dict[str, Callable[[Mapping[str, Any]], InputEvent]] = {
    DID_RECEIVE_SETTINGS: DidReceiveSettingsEvent.from_dict,
    DID_RECEIVE_GLOBAL_SETTINGS: DidReceiveGlobalSettingsEvent.from_dict,
    KEY_DOWN: KeyEvent.from_dict,
    KEY_UP: KeyEvent.from_dict,
    DIAL_ROTATE: DialRotateEvent.from_dict,
    DIAL_PRESS: DialPressEvent.from_dict,
    TOUCH_TAP: TouchTapEvent.from_dict,
    WILL_APPEAR: AppearEvent.from_dict,
    WILL_DISAPPEAR: AppearEvent.from_dict,
    TITLE_PARAMETERS_DID_CHANGE: TitleParametersDidChangeEvent.from_dict,
    DEVICE_DID_CONNECT: DeviceDidConnectEvent.from_dict,
    DEVICE_DID_DISCONNECT: DeviceDidDisconnectEvent.from_dict,
    APPLICATION_DID_LAUNCH: ApplicationEvent.from_dict,
    APPLICATION_DID_TERMINATE: ApplicationEvent.from_dict,
    SYSTEM_DID_WAKE_UP: SystemDidWakeUpEvent.from_dict,
    PROPERTY_INSPECTOR_DID_APPEAR: PropertyInspectorEvent.from_dict,
    PROPERTY_INSPECTOR_DID_DISAPPEAR: PropertyInspectorEvent.from_dict,
    SEND_TO_PLUGIN: SendToPluginEvent.from_dict,
}

KNOWN_EVENTS = frozenset(_DECODERS)


class EventParser:
    """Parse JSON text or mappings into :data:`InputEvent` instances."""

    def parse(self, data: Mapping[str, Any]) -> InputEvent:
        tag = data.get("event")
        if not isinstance(tag, str) or not tag:
            raise DecodeError("frame missing 'event' tag")
        decoder = _DECODERS.get(tag)
        if decoder is None:
            raise UnknownEventError(tag)
        try:
            return decoder(data)
        except DecodeError:
            raise
        except (TypeError, ValueError, AttributeError, IndexError) as exc:
            raise DecodeError(f"malformed {tag} frame: {exc}") from exc

    def parse_json(self, raw: str | bytes | bytearray) -> InputEvent:
        try:
            mapping = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise DecodeError(f"frame is not valid JSON: {exc}") from exc
        if not isinstance(mapping, Mapping):
            raise DecodeError("decoded frame must be a JSON object")
        return self.parse(mapping)


_DEFAULT_PARSER = EventParser()


def decode(raw: str | bytes | bytearray) -> InputEvent:
    """Decode one inbound text frame; raises :class:`DecodeError` on failure."""

    return _DEFAULT_PARSER.parse_json(raw)
