"""
Renderers for addt.

Output formatters for firewall rules and checks: terminal and JSON.
"""

from addt.renderers.json_renderer import JsonRenderer
from addt.renderers.terminal import TerminalRenderer

__all__ = [
    "TerminalRenderer",
    "JsonRenderer",
]
