"""Core library for the API navigator.

Contains the path codec, listing cache, navigation controller and the shared
configuration used by the CLI and TUI.
"""

__all__ = [
    "config",
    "controller",
    "cache",
    "paths",
]
