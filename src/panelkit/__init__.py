"""panelkit: error pages and service lookup for an admin panel on Starlette."""

from panelkit.bundle import register_services, setup_admin
from panelkit.container import Reference, ServiceContainer
from panelkit.decorators import inject, service
from panelkit.exceptions import (
    AdminError,
    ConfigurationError,
    EntityNotFoundError,
    EntityRemoveError,
    FlattenedException,
    ForbiddenActionError,
    NoEntitiesConfiguredError,
    RegistrationError,
    ResolutionError,
    ServiceNotFoundError,
    UndefinedEntityError,
)
from panelkit.integration import install_error_pages
from panelkit.lifecycle import InvalidReference, Lifecycle
from panelkit.listener import BaseErrorListener, ExceptionListener
from panelkit.wrapper import ContainerWrapper

__all__ = [
    "AdminError",
    "BaseErrorListener",
    "ConfigurationError",
    "ContainerWrapper",
    "EntityNotFoundError",
    "EntityRemoveError",
    "ExceptionListener",
    "FlattenedException",
    "ForbiddenActionError",
    "InvalidReference",
    "Lifecycle",
    "NoEntitiesConfiguredError",
    "Reference",
    "RegistrationError",
    "ResolutionError",
    "ServiceContainer",
    "ServiceNotFoundError",
    "UndefinedEntityError",
    "inject",
    "install_error_pages",
    "register_services",
    "service",
    "setup_admin",
]
