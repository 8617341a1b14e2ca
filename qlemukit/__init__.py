"""Helpers for a Sinclair QL emulator: options, ROMs, display geometry, block device, clock and tracing."""

__version__ = "0.1.0"