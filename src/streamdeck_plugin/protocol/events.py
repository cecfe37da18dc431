"""Inbound event shapes pushed by the Stream Deck host.

Wire fields are camelCase; the dataclasses expose snake_case attributes.
Each ``from_dict`` raises :class:`~streamdeck_plugin.errors.DecodeError` when a
required field is missing or has the wrong type.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple

from streamdeck_plugin.errors import DecodeError

DID_RECEIVE_SETTINGS = "didReceiveSettings"
DID_RECEIVE_GLOBAL_SETTINGS = "didReceiveGlobalSettings"
KEY_DOWN = "keyDown"
KEY_UP = "keyUp"
DIAL_ROTATE = "dialRotate"
DIAL_PRESS = "dialPress"
TOUCH_TAP = "touchTap"
WILL_APPEAR = "willAppear"
WILL_DISAPPEAR = "willDisappear"
TITLE_PARAMETERS_DID_CHANGE = "titleParametersDidChange"
DEVICE_DID_CONNECT = "deviceDidConnect"
DEVICE_DID_DISCONNECT = "deviceDidDisconnect"
APPLICATION_DID_LAUNCH = "applicationDidLaunch"
APPLICATION_DID_TERMINATE = "applicationDidTerminate"
SYSTEM_DID_WAKE_UP = "systemDidWakeUp"
PROPERTY_INSPECTOR_DID_APPEAR = "propertyInspectorDidAppear"
PROPERTY_INSPECTOR_DID_DISAPPEAR = "propertyInspectorDidDisappear"
SEND_TO_PLUGIN = "sendToPlugin"


def _require(data: Mapping[str, Any], key: str) -> Any:
    if key not in data or data[key] is None:
        raise DecodeError(f"frame missing required field {key!r}")
    return data[key]


def _require_str(data: Mapping[str, Any], key: str) -> str:
    value = _require(data, key)
    if not isinstance(value, str):
        raise DecodeError(f"field {key!r} must be a string, got {type(value).__name__}")
    return value


def _mapping(data: Mapping[str, Any], key: str) -> Dict[str, Any]:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise DecodeError(f"field {key!r} must be an object")
    return {str(k): v for k, v in value.items()}


def _optional_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


@dataclass(slots=True, frozen=True)
class Coordinates:
    column: int
    row: int

    @classmethod
    def from_dict(cls, data: Any) -> Optional["Coordinates"]:
        if not isinstance(data, Mapping):
            return None
        return cls(column=int(data.get("column", 0)), row=int(data.get("row", 0)))


class Controller(str, Enum):
    KEYPAD = "Keypad"
    ENCODER = "Encoder"

    @classmethod
    def parse(cls, value: Any) -> "Controller":
        try:
            return cls(value)
        except ValueError:
            return cls.KEYPAD


class TitleAlignment(str, Enum):
    TOP = "top"
    MIDDLE = "middle"
    BOTTOM = "bottom"


class DeviceType(int, Enum):
    STREAM_DECK = 0
    STREAM_DECK_MINI = 1
    STREAM_DECK_XL = 2
    STREAM_DECK_MOBILE = 3
    CORSAIR_G_KEYS = 4


@dataclass(slots=True, frozen=True)
class DeviceSize:
    columns: int
    rows: int


@dataclass(slots=True)
class DeviceInfo:
    name: str
    type: Optional[DeviceType] = None
    id: Optional[str] = None
    size: Optional[DeviceSize] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DeviceInfo":
        size = data.get("size")
        raw_type = _optional_int(data.get("type"))
        try:
            device_type = DeviceType(raw_type) if raw_type is not None else None
        except ValueError:
            device_type = None
        return cls(
            name=str(data.get("name", "")),
            type=device_type,
            id=data.get("id"),
            size=DeviceSize(int(size.get("columns", 0)), int(size.get("rows", 0)))
            if isinstance(size, Mapping)
            else None,
        )


# --- Scoped (action + context) events -----------------------------------------


@dataclass(slots=True)
class SettingsPayload:
    settings: Dict[str, Any]
    coordinates: Optional[Coordinates] = None
    is_in_multi_action: bool = False


@dataclass(slots=True)
class DidReceiveSettingsEvent:
    event: str
    action: str
    context: str
    device: str
    payload: SettingsPayload

    @property
    def settings(self) -> Dict[str, Any]:
        return self.payload.settings

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DidReceiveSettingsEvent":
        payload = _mapping(data, "payload")
        return cls(
            event=DID_RECEIVE_SETTINGS,
            action=_require_str(data, "action"),
            context=_require_str(data, "context"),
            device=str(data.get("device", "")),
            payload=SettingsPayload(
                settings=_mapping(payload, "settings"),
                coordinates=Coordinates.from_dict(payload.get("coordinates")),
                is_in_multi_action=bool(payload.get("isInMultiAction", False)),
            ),
        )


@dataclass(slots=True)
class KeyPayload:
    settings: Dict[str, Any]
    coordinates: Optional[Coordinates] = None
    state: Optional[int] = None
    user_desired_state: Optional[int] = None
    is_in_multi_action: bool = False


@dataclass(slots=True)
class KeyEvent:
    """``keyDown`` / ``keyUp``.

    ``is_double_tap`` and ``long_press_fired`` never come from the wire; the
    press tracker sets them on releases.
    """

    event: str
    action: str
    context: str
    device: str
    payload: KeyPayload
    is_double_tap: bool = False
    long_press_fired: bool = False

    @property
    def settings(self) -> Dict[str, Any]:
        return self.payload.settings

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "KeyEvent":
        payload = _mapping(data, "payload")
        return cls(
            event=str(data.get("event", KEY_DOWN)),
            action=_require_str(data, "action"),
            context=_require_str(data, "context"),
            device=str(data.get("device", "")),
            payload=KeyPayload(
                settings=_mapping(payload, "settings"),
                coordinates=Coordinates.from_dict(payload.get("coordinates")),
                state=_optional_int(payload.get("state")),
                user_desired_state=_optional_int(payload.get("userDesiredState")),
                is_in_multi_action=bool(payload.get("isInMultiAction", False)),
            ),
        )


@dataclass(slots=True)
class DialRotatePayload:
    settings: Dict[str, Any]
    ticks: int = 0
    pressed: bool = False
    coordinates: Optional[Coordinates] = None


@dataclass(slots=True)
class DialRotateEvent:
    event: str
    action: str
    context: str
    device: str
    payload: DialRotatePayload

    @property
    def settings(self) -> Dict[str, Any]:
        return self.payload.settings

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DialRotateEvent":
        payload = _mapping(data, "payload")
        return cls(
            event=DIAL_ROTATE,
            action=_require_str(data, "action"),
            context=_require_str(data, "context"),
            device=str(data.get("device", "")),
            payload=DialRotatePayload(
                settings=_mapping(payload, "settings"),
                ticks=int(payload.get("ticks", 0)),
                pressed=bool(payload.get("pressed", False)),
                coordinates=Coordinates.from_dict(payload.get("coordinates")),
            ),
        )


@dataclass(slots=True)
class DialPressPayload:
    settings: Dict[str, Any]
    pressed: Optional[bool] = None
    coordinates: Optional[Coordinates] = None


@dataclass(slots=True)
class DialPressEvent:
    event: str
    action: str
    context: str
    device: str
    payload: DialPressPayload

    @property
    def settings(self) -> Dict[str, Any]:
        return self.payload.settings

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DialPressEvent":
        payload = _mapping(data, "payload")
        pressed = payload.get("pressed")
        return cls(
            event=DIAL_PRESS,
            action=_require_str(data, "action"),
            context=_require_str(data, "context"),
            device=str(data.get("device", "")),
            payload=DialPressPayload(
                settings=_mapping(payload, "settings"),
                pressed=None if pressed is None else bool(pressed),
                coordinates=Coordinates.from_dict(payload.get("coordinates")),
            ),
        )


@dataclass(slots=True)
class TouchTapPayload:
    settings: Dict[str, Any]
    hold: bool = False
    tap_pos: Tuple[int, int] = (0, 0)
    coordinates: Optional[Coordinates] = None


@dataclass(slots=True)
class TouchTapEvent:
    event: str
    action: str
    context: str
    device: str
    payload: TouchTapPayload

    @property
    def settings(self) -> Dict[str, Any]:
        return self.payload.settings

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TouchTapEvent":
        payload = _mapping(data, "payload")
        raw_pos = payload.get("tapPos") or (0, 0)
        try:
            tap_pos = (int(raw_pos[0]), int(raw_pos[1]))
        except (TypeError, ValueError, IndexError) as exc:
            raise DecodeError("touchTap 'tapPos' must be a pair of integers") from exc
        return cls(
            event=TOUCH_TAP,
            action=_require_str(data, "action"),
            context=_require_str(data, "context"),
            device=str(data.get("device", "")),
            payload=TouchTapPayload(
                settings=_mapping(payload, "settings"),
                hold=bool(payload.get("hold", False)),
                tap_pos=tap_pos,
                coordinates=Coordinates.from_dict(payload.get("coordinates")),
            ),
        )


@dataclass(slots=True)
class AppearPayload:
    settings: Dict[str, Any]
    controller: Controller = Controller.KEYPAD
    coordinates: Optional[Coordinates] = None
    state: Optional[int] = None
    is_in_multi_action: bool = False


@dataclass(slots=True)
class AppearEvent:
    """``willAppear`` / ``willDisappear``."""

    event: str
    action: str
    context: str
    device: str
    payload: AppearPayload

    @property
    def settings(self) -> Dict[str, Any]:
        return self.payload.settings

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AppearEvent":
        payload = _mapping(data, "payload")
        return cls(
            event=str(data.get("event", WILL_APPEAR)),
            action=_require_str(data, "action"),
            context=_require_str(data, "context"),
            device=str(data.get("device", "")),
            payload=AppearPayload(
                settings=_mapping(payload, "settings"),
                controller=Controller.parse(payload.get("controller")),
                coordinates=Coordinates.from_dict(payload.get("coordinates")),
                state=_optional_int(payload.get("state")),
                is_in_multi_action=bool(payload.get("isInMultiAction", False)),
            ),
        )


@dataclass(slots=True)
class TitleParameters:
    font_family: str = ""
    font_size: int = 0
    font_style: str = ""
    font_underline: bool = False
    show_title: bool = True
    title_alignment: TitleAlignment = TitleAlignment.MIDDLE
    title_color: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TitleParameters":
        try:
            alignment = TitleAlignment(str(data.get("titleAlignment", "middle")).lower())
        except ValueError:
            alignment = TitleAlignment.MIDDLE
        return cls(
            font_family=str(data.get("fontFamily", "")),
            font_size=int(data.get("fontSize", 0)),
            font_style=str(data.get("fontStyle", "")),
            font_underline=bool(data.get("fontUnderline", False)),
            show_title=bool(data.get("showTitle", True)),
            title_alignment=alignment,
            title_color=str(data.get("titleColor", "")),
        )


@dataclass(slots=True)
class TitleParametersPayload:
    settings: Dict[str, Any]
    title: str = ""
    state: int = 0
    title_parameters: TitleParameters = field(default_factory=TitleParameters)
    coordinates: Optional[Coordinates] = None


@dataclass(slots=True)
class TitleParametersDidChangeEvent:
    event: str
    action: str
    context: str
    device: str
    payload: TitleParametersPayload

    @property
    def settings(self) -> Dict[str, Any]:
        return self.payload.settings

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TitleParametersDidChangeEvent":
        payload = _mapping(data, "payload")
        return cls(
            event=TITLE_PARAMETERS_DID_CHANGE,
            action=_require_str(data, "action"),
            context=_require_str(data, "context"),
            device=str(data.get("device", "")),
            payload=TitleParametersPayload(
                settings=_mapping(payload, "settings"),
                title=str(payload.get("title", "")),
                state=int(payload.get("state", 0)),
                title_parameters=TitleParameters.from_dict(_mapping(payload, "titleParameters")),
                coordinates=Coordinates.from_dict(payload.get("coordinates")),
            ),
        )


@dataclass(slots=True)
class PropertyInspectorEvent:
    """``propertyInspectorDidAppear`` / ``propertyInspectorDidDisappear``."""

    event: str
    action: str
    context: str
    device: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PropertyInspectorEvent":
        return cls(
            event=str(data.get("event", PROPERTY_INSPECTOR_DID_APPEAR)),
            action=_require_str(data, "action"),
            context=_require_str(data, "context"),
            device=str(data.get("device", "")),
        )


@dataclass(slots=True)
class SendToPluginEvent:
    event: str
    action: str
    context: str
    payload: Dict[str, Any]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SendToPluginEvent":
        return cls(
            event=SEND_TO_PLUGIN,
            action=_require_str(data, "action"),
            context=_require_str(data, "context"),
            payload=_mapping(data, "payload"),
        )


# --- Global events ---------------------------------------------------------------


@dataclass(slots=True)
class DidReceiveGlobalSettingsEvent:
    event: str
    settings: Dict[str, Any]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DidReceiveGlobalSettingsEvent":
        payload = _mapping(data, "payload")
        return cls(event=DID_RECEIVE_GLOBAL_SETTINGS, settings=_mapping(payload, "settings"))


@dataclass(slots=True)
class DeviceDidConnectEvent:
    event: str
    device: str
    device_info: DeviceInfo

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DeviceDidConnectEvent":
        return cls(
            event=DEVICE_DID_CONNECT,
            device=_require_str(data, "device"),
            device_info=DeviceInfo.from_dict(_mapping(data, "deviceInfo")),
        )


@dataclass(slots=True)
class DeviceDidDisconnectEvent:
    event: str
    device: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DeviceDidDisconnectEvent":
        return cls(event=DEVICE_DID_DISCONNECT, device=_require_str(data, "device"))


@dataclass(slots=True)
class ApplicationEvent:
    """``applicationDidLaunch`` / ``applicationDidTerminate``."""

    event: str
    application: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ApplicationEvent":
        payload = _mapping(data, "payload")
        source = payload if "application" in payload else data
        return cls(
            event=str(data.get("event", APPLICATION_DID_LAUNCH)),
            application=_require_str(source, "application"),
        )


@dataclass(slots=True)
class SystemDidWakeUpEvent:
    event: str = SYSTEM_DID_WAKE_UP

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SystemDidWakeUpEvent":
        return cls()


InputEvent = (
    DidReceiveSettingsEvent
    | DidReceiveGlobalSettingsEvent
    | KeyEvent
    | DialRotateEvent
    | DialPressEvent
    | TouchTapEvent
    | AppearEvent
    | TitleParametersDidChangeEvent
    | DeviceDidConnectEvent
    | DeviceDidDisconnectEvent
    | ApplicationEvent
    | SystemDidWakeUpEvent
    | PropertyInspectorEvent
    | SendToPluginEvent
)


