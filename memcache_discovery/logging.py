"""Loggers for memcache discovery components.

Every component logs through a child of the ``memcache_discovery`` logger,
e.g. ``memcache_discovery.connection`` or ``memcache_discovery.parser``.
The library attaches no handler on its own; applications either route the
namespace through their own logging setup or call :func:`configure_logging`.

Example:
    >>> import logging
    >>> from memcache_discovery.logging import configure_logging
    >>> configure_logging(level=logging.DEBUG)
"""

import logging
from typing import Optional


DISCOVERY_ROOT_LOGGER = "memcache_discovery"

DEFAULT_FORMAT = "%(asctime)s %(levelname)-7s [%(name)s] %(message)s"


class DiscoveryLoggerFactory:
    """Hands out loggers under the ``memcache_discovery`` namespace."""

    @classmethod
    def get_logger(cls, name: str = "") -> logging.Logger:
        """Return the component logger, or the namespace root when unnamed."""
        if not name:
            return logging.getLogger(DISCOVERY_ROOT_LOGGER)
        return logging.getLogger(f"{DISCOVERY_ROOT_LOGGER}.{name}")

    @classmethod
    def configure(
        cls,
        level: int = logging.INFO,
        format_string: str = DEFAULT_FORMAT,
        handler: Optional[logging.Handler] = None,
    ) -> logging.Logger:
        """Attach a handler to the namespace root and set its level.

        A second call only adjusts the level of the handlers already
        attached, so repeated configuration never duplicates output.
        """
        root = cls.get_logger()
        root.setLevel(level)

        if root.handlers:
            for existing in root.handlers:
                existing.setLevel(level)
            return root

        handler = handler or logging.StreamHandler()
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(format_string))
        root.addHandler(handler)
        return root

    @classmethod
    def set_level(cls, level: int, component: str = "") -> None:
        cls.get_logger(component).setLevel(level)

    @classmethod
    def disable(cls) -> None:
        cls.get_logger().disabled = True

    @classmethod
    def enable(cls) -> None:
        cls.get_logger().disabled = False


def get_logger(name: str = "") -> logging.Logger:
    """Shortcut for :meth:`DiscoveryLoggerFactory.get_logger`."""
    return DiscoveryLoggerFactory.get_logger(name)


def configure_logging(
    level: int = logging.INFO,
    format_string: str = DEFAULT_FORMAT,
    handler: Optional[logging.Handler] = None,
) -> logging.Logger:
    """Send discovery logs to ``handler`` (stderr by default).

    Args:
        level: Minimum level for the namespace and its handler.
        format_string: ``logging.Formatter`` format for new handlers.
        handler: Handler to attach instead of a ``StreamHandler``.

    Returns:
        The ``memcache_discovery`` root logger.
    """
    return DiscoveryLoggerFactory.configure(level, format_string, handler)


def set_level(level: int, component: str = "") -> None:
    DiscoveryLoggerFactory.set_level(level, component)
