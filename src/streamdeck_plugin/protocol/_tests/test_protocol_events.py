from __future__ import annotations

import json

import pytest

from streamdeck_plugin.errors import DecodeError, UnknownEventError
from streamdeck_plugin.protocol import (
    KNOWN_EVENTS,
    AppearEvent,
    ApplicationEvent,
    Controller,
    DeviceDidConnectEvent,
    DeviceType,
    DidReceiveGlobalSettingsEvent,
    DidReceiveSettingsEvent,
    EventParser,
    KeyEvent,
    SendToPluginEvent,
    SystemDidWakeUpEvent,
    TitleAlignment,
    TitleParametersDidChangeEvent,
    TouchTapEvent,
    decode,
)


def _frame(event: str, **fields) -> str:
    return json.dumps({"event": event, **fields})


def test_key_down_decodes_payload() -> None:
    raw = _frame(
        "keyDown",
        action="com.example.counter",
        context="ctx-1",
        device="dev-1",
        payload={
            "settings": {"count": 3},
            "coordinates": {"column": 2, "row": 1},
            "state": 1,
            "userDesiredState": 0,
            "isInMultiAction": False,
        },
    )

    event = decode(raw)

    assert isinstance(event, KeyEvent)
    assert event.event == "keyDown"
    assert event.action == "com.example.counter"
    assert event.context == "ctx-1"
    assert event.settings == {"count": 3}
    assert event.payload.coordinates.column == 2
    assert event.payload.coordinates.row == 1
    assert event.payload.state == 1
    assert event.payload.user_desired_state == 0
    assert event.is_double_tap is False


def test_key_up_keeps_its_tag() -> None:
    event = decode(_frame("keyUp", action="a", context="c", device="d", payload={"settings": {}}))
    assert isinstance(event, KeyEvent)
    assert event.event == "keyUp"


def test_appear_and_disappear_share_shape() -> None:
    appear = decode(
        _frame(
            "willAppear",
            action="a",
            context="c",
            device="d",
            payload={"settings": {"x": 1}, "controller": "Encoder", "isInMultiAction": True},
        )
    )
    disappear = decode(_frame("willDisappear", action="a", context="c", device="d", payload={"settings": {}}))

    assert isinstance(appear, AppearEvent)
    assert appear.payload.controller is Controller.ENCODER
    assert appear.payload.is_in_multi_action is True
    assert isinstance(disappear, AppearEvent)
    assert disappear.event == "willDisappear"
    assert disappear.payload.controller is Controller.KEYPAD


def test_title_parameters_are_snake_cased() -> None:
    event = decode(
        _frame(
            "titleParametersDidChange",
            action="a",
            context="c",
            device="d",
            payload={
                "title": "Hello",
                "state": 0,
                "settings": {},
                "titleParameters": {
                    "fontFamily": "Verdana",
                    "fontSize": 12,
                    "fontStyle": "Bold",
                    "fontUnderline": True,
                    "showTitle": True,
                    "titleAlignment": "bottom",
                    "titleColor": "#ffffff",
                },
            },
        )
    )

    assert isinstance(event, TitleParametersDidChangeEvent)
    params = event.payload.title_parameters
    assert params.font_family == "Verdana"
    assert params.font_size == 12
    assert params.font_underline is True
    assert params.title_alignment is TitleAlignment.BOTTOM
    assert event.payload.title == "Hello"


def test_touch_tap_position() -> None:
    event = decode(
        _frame(
            "touchTap",
            action="a",
            context="c",
            device="d",
            payload={"hold": True, "tapPos": [10, 42], "settings": {}, "coordinates": {"column": 0, "row": 0}},
        )
    )
    assert isinstance(event, TouchTapEvent)
    assert event.payload.tap_pos == (10, 42)
    assert event.payload.hold is True


def test_global_events() -> None:
    settings = decode(_frame("didReceiveGlobalSettings", payload={"settings": {"token": "abc"}}))
    assert isinstance(settings, DidReceiveGlobalSettingsEvent)
    assert settings.settings == {"token": "abc"}

    connect = decode(
        _frame(
            "deviceDidConnect",
            device="dev-9",
            deviceInfo={"name": "Deck XL", "type": 2, "size": {"columns": 8, "rows": 4}},
        )
    )
    assert isinstance(connect, DeviceDidConnectEvent)
    assert connect.device_info.type is DeviceType.STREAM_DECK_XL
    assert connect.device_info.size.columns == 8

    launch = decode(_frame("applicationDidLaunch", payload={"application": "com.apple.mail"}))
    assert isinstance(launch, ApplicationEvent)
    assert launch.application == "com.apple.mail"

    legacy = decode(_frame("applicationDidTerminate", application="com.apple.mail"))
    assert legacy.event == "applicationDidTerminate"
    assert legacy.application == "com.apple.mail"

    assert isinstance(decode(_frame("systemDidWakeUp")), SystemDidWakeUpEvent)


def test_settings_and_send_to_plugin() -> None:
    settings = decode(
        _frame("didReceiveSettings", action="a", context="c", device="d", payload={"settings": {"k": [1, 2]}})
    )
    assert isinstance(settings, DidReceiveSettingsEvent)
    assert settings.settings == {"k": [1, 2]}

    message = decode(_frame("sendToPlugin", action="a", context="c", payload={"cmd": "refresh"}))
    assert isinstance(message, SendToPluginEvent)
    assert message.payload == {"cmd": "refresh"}


def test_every_known_tag_has_a_decoder() -> None:
    assert len(KNOWN_EVENTS) == 18
    assert "keyDown" in KNOWN_EVENTS
    assert "sendToPlugin" in KNOWN_EVENTS


def test_unknown_event_tag() -> None:
    with pytest.raises(UnknownEventError) as info:
        decode(_frame("foo", action="a", context="c"))
    assert info.value.tag == "foo"
    assert isinstance(info.value, DecodeError)


@pytest.mark.parametrize(
    "raw",
    [
        "not json",
        "[1, 2, 3]",
        json.dumps({"action": "a"}),
        json.dumps({"event": "keyDown", "context": "c"}),
        json.dumps({"event": "keyDown", "action": 7, "context": "c"}),
        json.dumps({"event": "keyDown", "action": "a", "context": "c", "payload": "oops"}),
        json.dumps({"event": "touchTap", "action": "a", "context": "c", "payload": {"tapPos": "x"}}),
    ],
)
def test_malformed_frames_raise_decode_error(raw: str) -> None:
    with pytest.raises(DecodeError):
        EventParser().parse_json(raw)
