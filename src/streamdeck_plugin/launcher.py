"""
Entry point for plugins built on streamdeck_plugin.

The Stream Deck application launches the plugin executable with
``-port``, ``-pluginUUID``, ``-registerEvent`` and ``-info``; :func:`run`
parses them, connects and serves until the host closes the socket.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import Optional, Sequence

from streamdeck_plugin.action_manager import ActionManager
from streamdeck_plugin.config import RuntimeConfig, load_runtime_config, parse_args
from streamdeck_plugin.errors import TransportClosedError
from streamdeck_plugin.runtime.plugin_channel import PluginChannel

logger = logging.getLogger(__name__)

LOG_FORMAT = "[%(asctime)s] %(name)s - %(levelname)s - %(message)s"


def configure_logging(config: RuntimeConfig) -> None:
    # Keep root at INFO to avoid third-party DEBUG flood; debug only our package
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
    if config.debug:
        logging.getLogger("streamdeck_plugin").setLevel(logging.DEBUG)
    if not config.websockets_debug:
        for name in ("websockets", "websockets.client", "websockets.protocol"):
            logging.getLogger(name).setLevel(logging.INFO)


def run(
    manager: ActionManager,
    argv: Optional[Sequence[str]] = None,
    external: Optional[asyncio.Queue[str]] = None,
) -> int:
    """Parse host arguments, connect and dispatch until the transport ends.

    Returns a process exit code: 0 when the host closed the connection,
    1 when the transport failed.
    """

    config = load_runtime_config()
    configure_logging(config)
    args = parse_args(sys.argv[1:] if argv is None else argv)
    channel = PluginChannel(manager, args, config=config, external=external)
    try:
        channel.run()
    except TransportClosedError as exc:
        logger.warning("Stream Deck session ended: %s", exc)
        return 1
    except OSError as exc:
        logger.error("cannot reach Stream Deck on port %s: %s", args.port, exc)
        return 1
    return 0
