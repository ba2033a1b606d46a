#!/usr/bin/env python
"""
Profiler Example

A debugger-style session over the in-memory transport: the client enables
several domains concurrently, starts the profiler, waits for the runtime to
report that its execution context went away, then stops the profiler.
"""

import sys
import os
import logging
import threading
from concurrent.futures import wait

# Add project root directory to Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from seam_rpc import Client, Server
from seam_rpc.adapters.adapter_factory import AdapterFactory

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def setup_server(acceptor):
    server = Server(acceptor)
    api = server.api()

    def enable(params):
        return None

    def start(params):
        timer = threading.Timer(1.0, api.Runtime.emitExecutionContextDestroyed, [{"executionContextId": 1}])
        timer.daemon = True
        timer.start()

    def stop(params):
        return {"profile": {"head": None, "startTime": 0, "endTime": 100}}

    api.Debugger.expose({"enable": enable})
    api.Runtime.expose({"enable": enable, "run": lambda params: None})
    api.Profiler.expose({"enable": enable, "start": start, "stop": stop})
    return server


def run_client(channel):
    api = Client(channel, {"logConsole": True}).api()
    destroyed = threading.Event()
    api.Runtime.onExecutionContextDestroyed(lambda params: destroyed.set())

    channel.open()
    wait([
        api.Runtime.enable(),
        api.Debugger.enable(),
        api.Profiler.enable(),
        api.Runtime.run(),
    ], timeout=5)

    api.Profiler.start().result(timeout=5)
    destroyed.wait(timeout=5)
    return api.Profiler.stop().result(timeout=5)


def main():
    acceptor = AdapterFactory.create_acceptor("memory")
    server = setup_server(acceptor)
    try:
        profile = run_client(acceptor.connect("debugger"))
        logger.info(f"Profile: {profile}")
    finally:
        server.close()


if __name__ == "__main__":
    main()
