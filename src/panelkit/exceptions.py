"""Exceptions raised by panelkit.

The admin errors carry an HTTP status code and are turned into error pages
by :class:`panelkit.listener.ExceptionListener`. The container errors are
plain lookup failures.
"""

from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any, Dict, Mapping, Optional


class AdminError(Exception):
    """Base class of every error the admin bundle renders as a page.

    Args:
        public_message: Message safe to show to the end user. May contain
            ``%name%`` placeholders filled from *parameters*.
        debug_message: Message meant for logs and developers.
        parameters: Values for the placeholders of *public_message*.
        status_code: HTTP status code of the rendered error page.

    Examples:
        >>> err = AdminError("Entity %entity_name% is broken", parameters={"entity_name": "Product"})
        >>> err.status_code
        500
        >>> str(err)
        'Entity Product is broken'
    """

    def __init__(
        self,
        public_message: str,
        debug_message: Optional[str] = None,
        parameters: Optional[Mapping[str, Any]] = None,
        status_code: int = 500,
    ) -> None:
        self.public_message = public_message
        self.debug_message = debug_message
        self.parameters = dict(parameters or {})
        self.status_code = status_code
        super().__init__(debug_message or self.translated_message)

    @property
    def translated_message(self) -> str:
        message = self.public_message
        for key, value in self.parameters.items():
            message = message.replace(f"%{key}%", str(value))
        return message


class EntityNotFoundError(AdminError):
    """Raised when no row matches the requested entity id."""

    def __init__(self, entity_name: str, entity_id: Any) -> None:
        super().__init__(
            "The %entity_name% item with %entity_id_name% = %entity_id_value% does not exist.",
            debug_message=f"The '{entity_name}' entity with id '{entity_id}' does not exist in the database.",
            parameters={
                "entity_name": entity_name,
                "entity_id_name": "id",
                "entity_id_value": entity_id,
            },
            status_code=404,
        )
        self.entity_name = entity_name
        self.entity_id = entity_id


class ForbiddenActionError(AdminError):
    """Raised when an action is disabled for an entity."""

    def __init__(self, action: str, entity_name: str) -> None:
        super().__init__(
            'The requested "%action%" action is not allowed.',
            debug_message=(
                f"The requested '{action}' action is not allowed for the '{entity_name}' entity. "
                f"Solution: remove the '{action}' action from the 'disabled_actions' option."
            ),
            parameters={"action": action},
            status_code=403,
        )
        self.action = action
        self.entity_name = entity_name


class UndefinedEntityError(AdminError):
    def __init__(self, entity_name: str) -> None:
        super().__init__(
            'The "%entity_name%" entity is not defined in the configuration of your backend.',
            debug_message=(
                f"The '{entity_name}' entity is not defined in the configuration of your backend. "
                f"Solution: add it under the 'entities' key."
            ),
            parameters={"entity_name": entity_name},
            status_code=404,
        )
        self.entity_name = entity_name


class NoEntitiesConfiguredError(AdminError):
    def __init__(self) -> None:
        super().__init__(
            "The backend is empty because you haven't configured any entity to manage.",
            debug_message="Your backend is empty because you haven't configured any entity to manage. "
            "Solution: add entities under the 'entities' key.",
            status_code=500,
        )


class EntityRemoveError(AdminError):
    """Raised when deleting an item would break related data."""

    def __init__(self, entity_name: str, reason: str) -> None:
        super().__init__(
            "You can't delete this %entity_name% item because other items depend on it.",
            debug_message=reason,
            parameters={"entity_name": entity_name},
            status_code=409,
        )
        self.entity_name = entity_name


class ConfigurationError(Exception):
    """Raised when the admin configuration file cannot be used."""


class RegistrationError(Exception):
    """Raised when a service registration fails.

    Examples:
        >>> raise RegistrationError("Duplicate registration for mailer")
        Traceback (most recent call last):
            ...
        panelkit.exceptions.RegistrationError: Duplicate registration for mailer
    """


class ResolutionError(Exception):
    """Raised when a service cannot be built.

    Includes the reference chain to help diagnose missing references.

    Args:
        message: Description of the resolution failure.
        chain: The service names that led to the failure.
    """

    def __init__(self, message: str, chain: "list[str] | None" = None) -> None:
        if chain:
            chain_str = " -> ".join(chain)
            message = f"{message} (resolution chain: {chain_str})"
        super().__init__(message)
        self.chain = chain or []


class ServiceNotFoundError(ResolutionError):
    """Raised when a service name resolves nowhere.

    Examples:
        >>> err = ServiceNotFoundError("mailer")
        >>> err.service_name
        'mailer'
        >>> str(err)
        'You have requested a non-existent service "mailer".'
    """

    def __init__(self, service_name: str, chain: "list[str] | None" = None) -> None:
        super().__init__(f'You have requested a non-existent service "{service_name}".', chain=chain)
        self.service_name = service_name


@dataclass
class FlattenedException:
    """Template friendly snapshot of an exception and its causes."""

    class_name: str
    message: str
    public_message: str = ""
    status_code: int = 500
    headers: Dict[str, str] = field(default_factory=dict)
    previous: Optional["FlattenedException"] = None

    @property
    def status_text(self) -> str:
        try:
            return HTTPStatus(self.status_code).phrase
        except ValueError:
            return "Unknown Error"

    @classmethod
    def create(
        cls,
        exception: BaseException,
        status_code: Optional[int] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> "FlattenedException":
        if status_code is None:
            status_code = getattr(exception, "status_code", None) or 500
        if headers is None:
            headers = getattr(exception, "headers", None) or {}

        cause = visible_cause(exception)
        previous = cls.create(cause) if cause is not None and cause is not exception else None

        flattened = cls(
            class_name=f"{type(exception).__module__}.{type(exception).__qualname__}",
            message=str(exception),
            status_code=status_code,
            headers=dict(headers),
            previous=previous,
        )
        if isinstance(exception, AdminError):
            flattened.public_message = exception.translated_message
        else:
            flattened.public_message = flattened.status_text
        return flattened


def visible_cause(exception: BaseException) -> Optional[BaseException]:
    """Return the previous exception Python reports for *exception*.

    An explicit ``__cause__`` wins; ``__context__`` counts only when it is not
    suppressed by ``raise ... from``.

    Examples:
        >>> try:
        ...     try:
        ...         raise KeyError("inner")
        ...     except KeyError:
        ...         raise ValueError("outer") from None
        ... except ValueError as exc:
        ...     visible_cause(exc) is None
        True
    """
    if exception.__cause__ is not None:
        return exception.__cause__
    if exception.__suppress_context__:
        return None
    return exception.__context__
