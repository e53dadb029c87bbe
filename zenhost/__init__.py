"""Home-server host services: shares, connections, peers, notifications, file queues, uploads and system information."""

__version__ = "0.1.0"