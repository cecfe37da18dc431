"""Startup arguments passed by the host plus environment-derived runtime knobs."""

from __future__ import annotations

import argparse
import json
import logging
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Sequence

from streamdeck_plugin.protocol.events import DeviceInfo
from streamdeck_plugin.utils.env import env_bool, env_float, env_str

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ApplicationInfo:
    font: str = ""
    language: str = ""
    platform: str = ""
    platform_version: str = ""
    version: str = ""


@dataclass(frozen=True)
class ColorsInfo:
    button_mouse_over_background_color: str = ""
    button_pressed_background_color: str = ""
    button_pressed_border_color: str = ""
    button_pressed_text_color: str = ""
    highlight_color: str = ""


@dataclass(frozen=True)
class PluginMeta:
    uuid: str = ""
    version: str = ""


@dataclass(frozen=True)
class Info:
    """The ``-info`` JSON block describing the host, devices and plugin."""

    application: ApplicationInfo = field(default_factory=ApplicationInfo)
    colors: ColorsInfo = field(default_factory=ColorsInfo)
    device_pixel_ratio: int = 1
    devices: List[DeviceInfo] = field(default_factory=list)
    plugin: PluginMeta = field(default_factory=PluginMeta)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Info":
        app = data.get("application") or {}
        colors = data.get("colors") or {}
        plugin = data.get("plugin") or {}
        return cls(
            application=ApplicationInfo(
                font=str(app.get("font", "")),
                language=str(app.get("language", "")),
                platform=str(app.get("platform", "")),
                platform_version=str(app.get("platformVersion", "")),
                version=str(app.get("version", "")),
            ),
            colors=ColorsInfo(
                button_mouse_over_background_color=str(colors.get("buttonMouseOverBackgroundColor", "")),
                button_pressed_background_color=str(colors.get("buttonPressedBackgroundColor", "")),
                button_pressed_border_color=str(colors.get("buttonPressedBorderColor", "")),
                button_pressed_text_color=str(colors.get("buttonPressedTextColor", "")),
                highlight_color=str(colors.get("highlightColor", "")),
            ),
            device_pixel_ratio=int(data.get("devicePixelRatio", 1)),
            devices=[DeviceInfo.from_dict(d) for d in data.get("devices") or () if isinstance(d, Mapping)],
            plugin=PluginMeta(uuid=str(plugin.get("uuid", "")), version=str(plugin.get("version", ""))),
        )


@dataclass(frozen=True)
class PluginArgs:
    """Session descriptor built from the command line the host launches us with."""

    port: int
    plugin_uuid: str
    register_event: str
    info: Info = field(default_factory=Info)


def _info_arg(raw: str) -> Info:
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise argparse.ArgumentTypeError(f"-info is not valid JSON: {exc}") from exc
    if not isinstance(data, Mapping):
        raise argparse.ArgumentTypeError("-info must be a JSON object")
    return Info.from_dict(data)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Stream Deck plugin", allow_abbrev=False)
    parser.add_argument("-port", dest="port", type=int, required=True, help="websocket port of the host")
    parser.add_argument("-pluginUUID", dest="plugin_uuid", required=True, help="unique id of this plugin instance")
    parser.add_argument("-registerEvent", dest="register_event", required=True, help="registration event name")
    parser.add_argument("-info", dest="info", type=_info_arg, default=Info(), help="host/device info JSON")
    return parser


def parse_args(argv: Optional[Sequence[str]] = None) -> PluginArgs:
    """Parse the host-provided arguments; unknown flags are ignored."""

    ns, unknown = build_arg_parser().parse_known_args(argv)
    if unknown:
        logger.debug("ignoring unknown plugin arguments: %s", unknown)
    return PluginArgs(
        port=int(ns.port),
        plugin_uuid=str(ns.plugin_uuid),
        register_event=str(ns.register_event),
        info=ns.info,
    )


@dataclass(frozen=True)
class RuntimeConfig:
    """Resolved environment toggles for the plugin runtime."""

    host: str = "localhost"
    long_press_tick_s: float = 0.1
    double_tap_s: float = 0.5
    debug: bool = False
    websockets_debug: bool = False

    def url(self, port: int) -> str:
        return f"ws://{self.host}:{int(port)}"


def load_runtime_config() -> RuntimeConfig:
    tick_ms = env_float("LONG_PRESS_TICK_MS", 100.0)
    double_tap_ms = env_float("DOUBLE_TAP_MS", 500.0)
    return RuntimeConfig(
        host=env_str("HOST", "localhost") or "localhost",
        long_press_tick_s=max(0.0, tick_ms) / 1000.0,
        double_tap_s=max(0.0, double_tap_ms) / 1000.0,
        debug=env_bool("DEBUG", False),
        websockets_debug=env_bool("WEBSOCKETS_DEBUG", False),
    )
