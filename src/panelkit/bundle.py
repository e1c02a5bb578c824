"""Service definitions of the admin bundle."""

import logging
from typing import Annotated, Any, Iterable, Mapping, Optional

from starlette.applications import Starlette

from panelkit.container import Reference, ServiceContainer
from panelkit.integration import install_error_pages
from panelkit.listener import ExceptionListener
from panelkit.templating import TemplateEngine
from panelkit.wrapper import ContainerWrapper

CONFIG_SERVICE = "panelkit.config"
TEMPLATING_SERVICE = "panelkit.templating"
LOGGER_SERVICE = "logger"
EXCEPTION_LISTENER_SERVICE = "panelkit.listener.exception"


def register_services(
    container: ServiceContainer,
    config: Mapping[str, Any],
    search_paths: Iterable[str] = (),
    legacy_forwarding: bool = False,
) -> None:
    """Register the bundle services.

    The configuration and the template engine are private; the exception
    listener is public and wired to both. A ``logger`` service is used when
    the application registered one.
    """
    container.set(CONFIG_SERVICE, config, public=False)
    container.register(TEMPLATING_SERVICE, lambda: TemplateEngine(search_paths=search_paths), public=False)

    def exception_listener(
        templates: Annotated[TemplateEngine, Reference(TEMPLATING_SERVICE)],
        admin_config: Annotated[Mapping[str, Any], Reference(CONFIG_SERVICE)],
        logger: Annotated[Optional[logging.Logger], Reference(LOGGER_SERVICE)] = None,
    ) -> ExceptionListener:
        return ExceptionListener(templates, admin_config, logger=logger, legacy_forwarding=legacy_forwarding)

    container.register(EXCEPTION_LISTENER_SERVICE, exception_listener)


def setup_admin(app: Starlette, container: ServiceContainer) -> ExceptionListener:
    """Install the error pages of the bundle registered in *container* on *app*."""
    listener = ContainerWrapper(container).resolve(EXCEPTION_LISTENER_SERVICE)
    install_error_pages(app, listener)
    return listener
