"""Decorator helpers for registering and consuming services.

These decorators provide cleaner syntax for common container patterns.
"""

import functools
import inspect
from typing import Any, Callable, Optional

from panelkit.container import ServiceContainer, extract_reference
from panelkit.lifecycle import Lifecycle
from panelkit.wrapper import ContainerWrapper


def service(
    container: ServiceContainer,
    name: Optional[str] = None,
    *,
    public: bool = True,
    lifecycle: Lifecycle = Lifecycle.SINGLETON,
) -> Callable[[Any], Any]:
    """Register a class or factory function with *container*.

    Args:
        container: The container to register into.
        name: Service name. Defaults to the target's ``__name__``.
        public: Whether the service is reachable through
            ``ServiceContainer.get``.
        lifecycle: ``Lifecycle.SINGLETON`` (default) or ``Lifecycle.TRANSIENT``.

    Returns:
        A decorator returning its target unmodified (but now registered).

    Examples:
        >>> container = ServiceContainer()
        >>> @service(container, "greeter")
        ... class Greeter:
        ...     def greet(self) -> str:
        ...         return "hello"
        >>> container.get("greeter").greet()
        'hello'
    """

    def decorator(target: Any) -> Any:
        container.register(
            name if name is not None else target.__name__,
            target,
            public=public,
            lifecycle=lifecycle,
        )
        return target

    return decorator


def inject(locator: ContainerWrapper) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Fill ``Reference`` annotated parameters from *locator* at call time.

    Parameters that the caller supplies explicitly are left as-is. Private
    services are reachable because lookups go through
    :meth:`ContainerWrapper.resolve`.

    Examples:
        >>> from typing import Annotated
        >>> from panelkit.container import Reference
        >>> container = ServiceContainer()
        >>> container.set("answer", 42, public=False)
        >>> @inject(ContainerWrapper(container))
        ... def show(n: Annotated[int, Reference("answer")]) -> str:
        ...     return str(n)
        >>> show()
        '42'
    """

    def decorator(fn: Callable[..., Any]) -> Callable[..., Any]:
        sig = inspect.signature(fn)

        @functools.wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            bound = sig.bind_partial(*args, **kwargs)

            for param_name, param in sig.parameters.items():
                if param_name in bound.arguments:
                    continue
                reference = extract_reference(param.annotation)
                if reference is not None:
                    kwargs[param_name] = locator.resolve(reference)

            return fn(*args, **kwargs)

        return wrapper

    return decorator
