#!/usr/bin/env python
"""
ZeroMQ Server Example

Exposes a small game API over a ZeroMQ ROUTER acceptor and broadcasts a
level-up notification to every peer that has called in.
"""

import sys
import os
import time
import signal
import logging
from typing import Dict, Any

# Add project root directory to Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from seam_rpc import Server
from seam_rpc.adapters.zeromq import ZeroMQAcceptor
from seam_rpc.config import LogOptions, TelemetryConfig, configure_telemetry
from seam_rpc.telemetry.metrics import increment_counter

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

players: Dict[str, int] = {}


def join(params: Dict[str, Any]) -> Dict[str, Any]:
    """Register a player

    Args:
        params: {"name": player name}

    Returns:
        The player's current level
    """
    name = params["name"]
    players.setdefault(name, 1)
    logger.info(f"Player joined: {name}")
    increment_counter("game.players.joined", 1)
    return {"name": name, "level": players[name]}


async def train(params: Dict[str, Any]) -> Dict[str, Any]:
    """Train for a while, then level up and tell everyone"""
    import asyncio
    await asyncio.sleep(params.get("seconds", 0.5))
    name = params["name"]
    players[name] = players.get(name, 1) + 1
    return {"name": name, "level": players[name]}


def main():
    """Start ZeroMQ server example"""
    configure_telemetry(TelemetryConfig.from_env())

    acceptor = ZeroMQAcceptor(bind_address="tcp://*:5555")
    server = Server(acceptor, LogOptions.from_env())
    api = server.api()

    api.Game.expose({"join": join, "train": train})
    api.Game.onChat(lambda params: logger.info(f"Chat: {params}"))

    # Add SIGINT handler for graceful exit
    def handle_sigint(sig, frame):
        logger.info("Received exit signal, stopping server...")
        acceptor.close()
        server.close()
        sys.exit(0)

    signal.signal(signal.SIGINT, handle_sigint)

    logger.info(f"Exposed methods: {server.exposed_methods()}")
    acceptor.start(threaded=True)

    try:
        while True:
            time.sleep(5)
            if acceptor.clients:
                api.Game.emitTick({"players": dict(players)})
    except KeyboardInterrupt:
        logger.info("Received exit signal, stopping server...")
    finally:
        acceptor.close()
        server.close()

    logger.info("Server stopped")


if __name__ == "__main__":
    main()
