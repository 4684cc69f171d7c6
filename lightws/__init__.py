"""A lightweight WebSocket client with callback-based receiving, framing helpers and a command line."""

__version__ = "0.1.0"
__all__ = ["client", "frame", "cli"]