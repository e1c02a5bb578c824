"""Named service container with public and private visibility."""

import inspect
import logging
from typing import Annotated, Any, Callable, Dict, List, Optional, Tuple, get_args, get_origin

from panelkit.exceptions import RegistrationError, ResolutionError, ServiceNotFoundError
from panelkit.lifecycle import InvalidReference, Lifecycle

logger = logging.getLogger(__name__)


class Reference:
    """Marker for wiring a constructor parameter to a named service.

    Use with ``typing.Annotated``; private services may be referenced too.

    Args:
        name: The service name passed to ``register`` or ``set``.

    Examples:
        >>> from typing import Annotated
        >>> class Mailer:
        ...     def __init__(self, transport: Annotated[object, Reference("mailer.transport")]):
        ...         self.transport = transport
    """

    def __init__(self, name: str) -> None:
        self.name = name

    def __repr__(self) -> str:
        return f"Reference({self.name!r})"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Reference) and self.name == other.name

    def __hash__(self) -> int:
        return hash(self.name)


_Definition = Tuple[Callable[..., Any], Lifecycle, bool]


class ServiceContainer:
    """A registry mapping names to service instances.

    Public services are reachable through :meth:`get`. Private services can
    only be injected into other services; once built, their instances are
    kept in :attr:`privates`.

    Examples:
        >>> container = ServiceContainer()
        >>> container.register("port", lambda: 8080)
        >>> container.get("port")
        8080
        >>> container.set("secret", "s3cr3t", public=False)
        >>> container.get("secret", InvalidReference.NULL) is None
        True
        >>> container.privates["secret"]
        's3cr3t'
    """

    def __init__(self) -> None:
        self._definitions: Dict[str, _Definition] = {}
        self._services: Dict[str, Any] = {}
        self.privates: Dict[str, Any] = {}

    def register(
        self,
        name: str,
        factory: Optional[Callable[..., Any]] = None,
        *,
        public: bool = True,
        lifecycle: Lifecycle = Lifecycle.SINGLETON,
    ) -> None:
        """Register a service factory under *name*.

        Args:
            name: Unique service name.
            factory: A callable producing the instance. Parameters annotated
                with ``Annotated[T, Reference("other")]`` are wired
                automatically.
            public: Whether :meth:`get` may return the service.
            lifecycle: ``Lifecycle.SINGLETON`` (default) or
                ``Lifecycle.TRANSIENT``.

        Raises:
            RegistrationError: If the name is taken or the factory is not
                callable.
        """
        if factory is None or not callable(factory):
            raise RegistrationError(
                f"factory for service '{name}' must be callable, got {type(factory).__name__}"
            )
        self._ensure_free(name)
        self._definitions[name] = (factory, lifecycle, public)

    def set(self, name: str, instance: Any, *, public: bool = True) -> None:
        """Register an already built instance."""
        self._ensure_free(name)
        if public:
            self._services[name] = instance
        else:
            self.privates[name] = instance

    def has(self, name: str) -> bool:
        """Tell whether :meth:`get` can return *name*.

        Args:
            name: The service name.

        Returns:
            ``True`` for public services, built or not. Private services
            always give ``False``.
        """
        if name in self._services:
            return True
        definition = self._definitions.get(name)
        return definition is not None and definition[2]

    def get(
        self,
        name: str,
        invalid_behavior: InvalidReference = InvalidReference.EXCEPTION,
    ) -> Any:
        """Resolve a public service.

        Args:
            name: The service name.
            invalid_behavior: What to do when *name* is unknown or private.

        Returns:
            The service instance, or ``None`` with ``InvalidReference.NULL``.

        Raises:
            ServiceNotFoundError: If the service is unknown or private and
                *invalid_behavior* is ``InvalidReference.EXCEPTION``.
        """
        if not self.has(name):
            if invalid_behavior is InvalidReference.NULL:
                return None
            raise ServiceNotFoundError(name)
        return self._resolve(name, [])

    def service_names(self) -> List[str]:
        names = set(self._services) | {n for n, (_, _, public) in self._definitions.items() if public}
        return sorted(names)

    def _is_defined(self, name: str) -> bool:
        return name in self._definitions or name in self._services or name in self.privates

    def _ensure_free(self, name: str) -> None:
        if self._is_defined(name):
            raise RegistrationError(f"Duplicate registration for {name}")

    def _resolve(self, name: str, chain: List[str]) -> Any:
        if name in self._services:
            return self._services[name]
        if name in self.privates:
            return self.privates[name]

        definition = self._definitions.get(name)
        if definition is None:
            raise ServiceNotFoundError(name, chain=chain + [name])
        if name in chain:
            raise ResolutionError(f"Circular reference to service '{name}'", chain=chain + [name])

        factory, lifecycle, public = definition
        instance = self._create_instance(factory, chain + [name])

        if lifecycle is Lifecycle.SINGLETON:
            if public:
                self._services[name] = instance
            else:
                self.privates[name] = instance
            logger.debug("Built %s service %r", "public" if public else "private", name)

        return instance

    def _create_instance(self, factory: Callable[..., Any], chain: List[str]) -> Any:
        """Call *factory*, wiring its ``Reference`` annotated parameters."""
        try:
            sig = inspect.signature(factory)
        except (ValueError, TypeError):
            return factory()

        kwargs: Dict[str, Any] = {}
        for param_name, param in sig.parameters.items():
            reference = extract_reference(param.annotation)
            if reference is None:
                continue
            try:
                kwargs[param_name] = self._resolve(reference, chain)
            except ServiceNotFoundError:
                if self._is_defined(reference):
                    raise
                if param.default is not inspect.Parameter.empty:
                    continue
                raise ResolutionError(
                    f"Cannot wire parameter '{param_name}' to service '{reference}'",
                    chain=chain + [reference],
                )

        return factory(**kwargs)


def extract_reference(annotation: Any) -> Optional[str]:
    """Return the service name of an ``Annotated[T, Reference(name)]`` hint.

    Examples:
        >>> extract_reference(Annotated[str, Reference("db")])
        'db'
        >>> extract_reference(str) is None
        True
    """
    if get_origin(annotation) is Annotated:
        for extra in get_args(annotation)[1:]:
            if isinstance(extra, Reference):
                return extra.name
    return None
