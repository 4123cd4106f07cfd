"""Module-level query API."""

from .query import (
    configure,
    find,
    find_all,
    find_text,
    get_default_config,
    get_default_matcher,
)

__all__ = [
    "configure",
    "find",
    "find_all",
    "find_text",
    "get_default_config",
    "get_default_matcher",
]
