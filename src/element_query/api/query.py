"""Module-level query functions with progressive disclosure.

Level 1 is ``find_all`` / ``find`` / ``find_text`` (and the same methods on
:class:`~element_query.tree.Element`), all backed by one process-wide
:class:`~element_query.path.PathMatcher`. Level 2 is ``configure`` to swap the
configuration behind that matcher, or constructing a ``PathMatcher`` directly.
"""

from typing import TYPE_CHECKING, List, Optional, Union

from element_query.path import CompiledPath, PathMatcher
from element_query.shared import ElementQueryConfig, get_logger, set_package_log_level

if TYPE_CHECKING:
    from element_query.tree import Element

PathLike = Union[str, CompiledPath]

_default_matcher: Optional[PathMatcher] = None

logger = get_logger(__name__, component="api")


def configure(config: Optional[ElementQueryConfig] = None) -> PathMatcher:
    """Install a fresh default matcher built from ``config``.

    The package logger level is set from ``config.global_.logging_level``;
    handlers are left to the application.

    Returns:
        The newly installed default matcher
    """
    global _default_matcher

    config = config or ElementQueryConfig()
    set_package_log_level(config.global_.logging_level)
    _default_matcher = PathMatcher(config)

    logger.info(
        "Default matcher configured",
        extra={
            "config_name": config.name,
            "cache_enabled": config.query.enable_caching,
            "cache_size_limit": config.query.cache_size_limit,
        }
    )
    return _default_matcher


def get_default_matcher() -> PathMatcher:
    """Return the process-wide matcher, creating it on first use."""
    global _default_matcher
    if _default_matcher is None:
        _default_matcher = PathMatcher()
    return _default_matcher


def get_default_config() -> ElementQueryConfig:
    """Configuration of the process-wide matcher."""
    return get_default_matcher().config


def find_all(element: "Element", path: PathLike) -> List["Element"]:
    """All elements selected by ``path`` starting at ``element``.

    Examples:
        >>> root = Element("root")
        >>> b = root.create_child("b")
        >>> c = b.create_child("c")
        >>> find_all(root, "//c") == [c]
        True
        >>> find_all(c, "..") == [b]
        True
    """
    return get_default_matcher().find_all(element, path)


def find(element: "Element", path: PathLike) -> Optional["Element"]:
    """First element selected by ``path`` or ``None``."""
    return get_default_matcher().find(element, path)


def find_text(
    element: "Element",
    path: PathLike,
    default: Optional[str] = None,
) -> Optional[str]:
    """Text of the first element selected by ``path``, else ``default``."""
    return get_default_matcher().find_text(element, path, default)
