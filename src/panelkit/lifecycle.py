"""Lifecycle and lookup behavior flags for the service container."""

from enum import Enum


class Lifecycle(Enum):
    """Defines the lifecycle of a registered service.

    Attributes:
        SINGLETON: The same instance is returned on every resolution.
        TRANSIENT: A new instance is created on every resolution.

    Examples:
        >>> Lifecycle.SINGLETON
        <Lifecycle.SINGLETON: 'singleton'>
    """

    SINGLETON = "singleton"
    TRANSIENT = "transient"


class InvalidReference(Enum):
    """What :meth:`ServiceContainer.get` does when a name is unknown.

    Attributes:
        EXCEPTION: Raise :class:`~panelkit.exceptions.ServiceNotFoundError`.
        NULL: Return ``None``.
    """

    EXCEPTION = "exception"
    NULL = "null"
