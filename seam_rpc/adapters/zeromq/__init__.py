"""
ZeroMQ Adapter Package

DEALER/ROUTER transport for the JSON-RPC engines: ZeroMQChannel backs a
Client, ZeroMQAcceptor backs a Server.
"""

from seam_rpc.adapters.zeromq.channel import ZeroMQChannel
from seam_rpc.adapters.zeromq.acceptor import ZeroMQAcceptor, ZeroMQConnection

__all__ = ["ZeroMQChannel", "ZeroMQAcceptor", "ZeroMQConnection"]
