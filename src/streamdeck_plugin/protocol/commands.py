"""Outbound command frames sent from the plugin to the Stream Deck host.

Every builder returns a frozen dataclass whose ``to_dict`` yields the exact
wire shape and ``to_json`` the compact text frame. Optional payload fields are
omitted rather than sent as ``null``.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field, is_dataclass
from enum import IntEnum
from typing import Any, Dict, Mapping, Optional

SET_TITLE = "setTitle"
SET_IMAGE = "setImage"
SET_STATE = "setState"
SHOW_OK = "showOk"
SHOW_ALERT = "showAlert"
SET_SETTINGS = "setSettings"
GET_SETTINGS = "getSettings"
SET_GLOBAL_SETTINGS = "setGlobalSettings"
GET_GLOBAL_SETTINGS = "getGlobalSettings"
SWITCH_TO_PROFILE = "switchToProfile"
SEND_TO_PROPERTY_INSPECTOR = "sendToPropertyInspector"
LOG_MESSAGE = "logMessage"
OPEN_URL = "openUrl"
SET_FEEDBACK = "setFeedback"
SET_FEEDBACK_LAYOUT = "setFeedbackLayout"


class Target(IntEnum):
    """Which surface a title/image update applies to."""

    ALL = 0
    HARDWARE = 1
    SOFTWARE = 2


class ActionState(IntEnum):
    FIRST = 0
    SECOND = 1


def _strip_none(obj: Any) -> Any:
    if isinstance(obj, dict):
        return {key: _strip_none(val) for key, val in obj.items() if val is not None}
    return obj


def settings_to_dict(settings: Any) -> Dict[str, Any]:
    """Normalise a settings object (mapping or dataclass) into a plain dict."""

    if settings is None:
        return {}
    if is_dataclass(settings) and not isinstance(settings, type):
        return asdict(settings)
    if isinstance(settings, Mapping):
        return {str(k): v for k, v in settings.items()}
    raise TypeError(f"settings must be a mapping or dataclass instance, got {type(settings).__name__}")


@dataclass(frozen=True, slots=True)
class Command:
    """A single outbound frame."""

    event: str
    context: Optional[str] = None
    action: Optional[str] = None
    device: Optional[str] = None
    payload: Optional[Mapping[str, Any]] = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        frame: Dict[str, Any] = {"event": self.event}
        frame.update(self.extra)
        if self.action is not None:
            frame["action"] = self.action
        if self.context is not None:
            frame["context"] = self.context
        if self.device is not None:
            frame["device"] = self.device
        if self.payload is not None:
            frame["payload"] = dict(self.payload)
        return frame

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"))


def build_registration(register_event: str, plugin_uuid: str) -> Command:
    return Command(event=register_event, extra={"uuid": plugin_uuid})


def build_show_ok(context: str) -> Command:
    return Command(event=SHOW_OK, context=context)


def build_show_alert(context: str) -> Command:
    return Command(event=SHOW_ALERT, context=context)


def _title_image_payload(
    key: str,
    value: Optional[str],
    target: Optional[Target],
    state: Optional[ActionState],
) -> Dict[str, Any]:
    # A null title or image resets the key to its manifest default, so the key
    # is always sent.
    payload: Dict[str, Any] = {key: value}
    payload.update(
        _strip_none(
            {
                "target": int(target) if target is not None else None,
                "state": int(state) if state is not None else None,
            }
        )
    )
    return payload


def build_set_title(
    context: str,
    title: Optional[str],
    *,
    target: Optional[Target] = None,
    state: Optional[ActionState] = None,
) -> Command:
    return Command(event=SET_TITLE, context=context, payload=_title_image_payload("title", title, target, state))


def build_set_image(
    context: str,
    image: Optional[str],
    *,
    target: Optional[Target] = None,
    state: Optional[ActionState] = None,
) -> Command:
    return Command(event=SET_IMAGE, context=context, payload=_title_image_payload("image", image, target, state))


def build_set_state(context: str, state: int) -> Command:
    return Command(event=SET_STATE, context=context, payload={"state": int(state)})


def build_set_settings(context: str, settings: Any) -> Command:
    return Command(event=SET_SETTINGS, context=context, payload=settings_to_dict(settings))


def build_get_settings(context: str) -> Command:
    return Command(event=GET_SETTINGS, context=context)


def build_set_global_settings(plugin_uuid: str, settings: Any) -> Command:
    return Command(event=SET_GLOBAL_SETTINGS, context=plugin_uuid, payload=settings_to_dict(settings))


def build_get_global_settings(plugin_uuid: str) -> Command:
    return Command(event=GET_GLOBAL_SETTINGS, context=plugin_uuid)


def build_switch_to_profile(plugin_uuid: str, device: str, profile: str) -> Command:
    return Command(
        event=SWITCH_TO_PROFILE,
        context=plugin_uuid,
        device=device,
        payload={"profile": profile},
    )


def build_send_to_property_inspector(action: str, context: str, payload: Mapping[str, Any]) -> Command:
    return Command(
        event=SEND_TO_PROPERTY_INSPECTOR,
        action=action,
        context=context,
        payload=dict(payload),
    )


def build_log_message(message: str) -> Command:
    return Command(event=LOG_MESSAGE, payload={"message": message})


def build_open_url(url: str) -> Command:
    return Command(event=OPEN_URL, payload={"url": url})


def build_set_feedback(context: str, payload: Mapping[str, Any]) -> Command:
    return Command(event=SET_FEEDBACK, context=context, payload=dict(payload))


def build_set_feedback_layout(context: str, layout: str) -> Command:
    return Command(event=SET_FEEDBACK_LAYOUT, context=context, payload={"layout": layout})
