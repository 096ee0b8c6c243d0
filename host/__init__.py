"""LIT host package: wraps the game rooms with networking."""

from .server import ClientSession, HostServer

__all__ = ["ClientSession", "HostServer"]
