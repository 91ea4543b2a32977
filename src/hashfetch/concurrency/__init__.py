"""Concurrency — closable channels for the worker fan-out/fan-in."""

from hashfetch.concurrency.channel import Channel

__all__ = ["Channel"]
