#!/usr/bin/env python
"""
ZeroMQ Client Example

Calls the game API exposed by zeromq_server_example.py and listens for its
tick notifications.
"""

import sys
import os
import time
import logging

# Add project root directory to Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from seam_rpc import Client, MessageError
from seam_rpc.adapters.zeromq import ZeroMQChannel
from seam_rpc.config import LogOptions

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def main():
    """Run ZeroMQ client example"""
    channel = ZeroMQChannel(server_address="tcp://localhost:5555")
    client = Client(channel, LogOptions(log_console=True))
    api = client.api()

    api.Game.onTick(lambda params: logger.info(f"Tick: {params}"))
    client.on("error", lambda error: logger.warning(f"Protocol error: {error}"))

    # Calls made before start() are queued and flushed on 'open'
    joined = api.Game.join({"name": "ada"})
    channel.start()

    try:
        logger.info(f"Joined: {joined.result(timeout=5)}")

        start_time = time.time()
        trained = api.Game.train({"name": "ada", "seconds": 0.2}).result(timeout=5)
        logger.info(f"Trained in {time.time() - start_time:.3f} seconds: {trained}")

        api.Game.emitChat({"from": "ada", "text": "hello"})

        try:
            api.Game.quit().result(timeout=5)
        except MessageError as e:
            logger.info(f"Expected failure: {e.code} {e.message}")

        logger.info("Waiting for ticks (press Ctrl+C to terminate)...")
        while True:
            time.sleep(1)

    except KeyboardInterrupt:
        logger.info("Received termination signal, exiting client...")
    finally:
        channel.close()

    logger.info("Client exited")


if __name__ == "__main__":
    main()
