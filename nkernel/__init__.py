"""Containers, FIFO synchronisation primitives, tasks, synchronous messages
and a sealed-bid auction for Python threads."""

__version__ = "0.1.0"
__all__ = ["structures", "sync", "clock", "tasks", "messages", "auction"]