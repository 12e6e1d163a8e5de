"""
Adapters layer for addt.

Contains all infrastructure implementations: filesystem and telemetry.
"""

from addt.adapters.fs import FileSystemAdapter
from addt.adapters.otel import OtelAdapter

__all__ = [
    "FileSystemAdapter",
    "OtelAdapter",
]
