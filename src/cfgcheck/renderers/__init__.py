"""
Renderers for cfgcheck.

Output formatters for validation results: terminal and JSON.
"""

from cfgcheck.renderers.terminal import TerminalRenderer
from cfgcheck.renderers.json_renderer import JsonRenderer

__all__ = [
    "TerminalRenderer",
    "JsonRenderer",
]
