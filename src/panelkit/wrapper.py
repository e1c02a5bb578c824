"""Lookup helper exposing private services of a container."""

from typing import Any

from panelkit.container import ServiceContainer
from panelkit.exceptions import ServiceNotFoundError
from panelkit.lifecycle import InvalidReference


class ContainerWrapper:
    """Resolve services by name, falling back to the private instances.

    Examples:
        >>> container = ServiceContainer()
        >>> container.set("twig", "engine", public=False)
        >>> ContainerWrapper(container).resolve("twig")
        'engine'
    """

    def __init__(self, container: ServiceContainer) -> None:
        self._container = container

    def resolve(self, name: str) -> Any:
        """Resolve *name* as a public service, else from the private instances.

        A ``None`` value counts as missing in both tiers.

        Args:
            name: The service name.

        Returns:
            The service instance.

        Raises:
            ServiceNotFoundError: If neither tier holds an instance for *name*.
        """
        service = self._container.get(name, InvalidReference.NULL)
        if service is not None:
            return service

        service = self._container.privates.get(name)
        if service is not None:
            return service

        raise ServiceNotFoundError(name)
