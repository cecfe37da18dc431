from __future__ import annotations

import pytest

from streamdeck_plugin import ActionManager
from streamdeck_plugin import launcher
from streamdeck_plugin.errors import TransportClosedError
from streamdeck_plugin.runtime.plugin_channel import PluginChannel

_ARGV = ["-port", "28196", "-pluginUUID", "ABC", "-registerEvent", "registerPlugin"]


def test_clean_close_exits_zero(monkeypatch: pytest.MonkeyPatch) -> None:
    seen = {}

    def fake_run(self: PluginChannel) -> None:
        seen["url"] = self.config.url(self.args.port)

    monkeypatch.setattr(PluginChannel, "run", fake_run)
    monkeypatch.delenv("STREAMDECK_PLUGIN_HOST", raising=False)
    assert launcher.run(ActionManager(), _ARGV) == 0
    assert seen["url"] == "ws://localhost:28196"


@pytest.mark.parametrize("exc", [TransportClosedError("gone"), ConnectionRefusedError("refused")])
def test_transport_failure_exits_one(monkeypatch: pytest.MonkeyPatch, exc: Exception) -> None:
    def fake_run(self: PluginChannel) -> None:
        raise exc

    monkeypatch.setattr(PluginChannel, "run", fake_run)
    assert launcher.run(ActionManager(), _ARGV) == 1
