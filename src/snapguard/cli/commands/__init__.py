"""CLI command modules for snapguard."""

from .config_cmd import config
from .directives_cmd import directives, mute, status, unmute
from .golden_cmd import accept, compare

__all__ = [
    "accept",
    "compare",
    "config",
    "directives",
    "mute",
    "status",
    "unmute",
]
