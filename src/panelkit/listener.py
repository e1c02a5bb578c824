"""Error listeners turning admin exceptions into themed error pages."""

import logging
import traceback
from contextvars import ContextVar
from typing import Any, Callable, Mapping, Optional, Union

from starlette.exceptions import HTTPException
from starlette.requests import Request
from starlette.responses import HTMLResponse, Response

from panelkit.config import template_paths
from panelkit.exceptions import AdminError, FlattenedException, visible_cause
from panelkit.kernel import SUB_REQUEST, ExceptionEvent, duplicate_request, request_format
from panelkit.templating import TemplateEngine

_current_entity_name: ContextVar[Optional[str]] = ContextVar("panelkit_current_entity_name", default=None)


def _location(exception: BaseException) -> str:
    frames = traceback.extract_tb(exception.__traceback__)
    if not frames:
        return "unknown location"
    return f"{frames[-1].filename} line {frames[-1].lineno}"


def link_previous(error: BaseException, original: BaseException) -> None:
    """Make *original* the root cause of *error* unless it already is in its chain.

    Only the chain Python reports is walked: a context hidden by
    ``raise ... from None`` ends it, and *original* is attached there.

    Args:
        error: The failure raised while handling *original*.
        original: The exception the failing sub-request was rendering.
    """
    seen = {id(error)}
    wrapper = error
    if wrapper is original:
        return
    while True:
        previous = visible_cause(wrapper)
        if previous is None or id(previous) in seen:
            break
        if previous is original:
            return
        seen.add(id(previous))
        wrapper = previous
    wrapper.__cause__ = original


class BaseErrorListener:
    """Default handling of uncaught exceptions.

    Logs the exception, then forwards a GET copy of the request to
    *controller* as a sub-request and uses its response.
    """

    def __init__(self, controller: Callable[..., Response], logger: Optional[logging.Logger] = None) -> None:
        self.controller = controller
        self.logger = logger if logger is not None else logging.getLogger(__name__)

    def on_kernel_exception(self, event: ExceptionEvent) -> None:
        """Forward *event* to the controller and store its response on the event."""
        exception = event.exception
        self.log_kernel_exception(event)

        request = self.duplicate_request(exception, event.request)

        try:
            response = event.kernel.handle(request, SUB_REQUEST, catch=False)
        except Exception as e:
            self.log_exception(e, f"Exception thrown when handling an exception ({type(e).__name__}: {e})")
            link_previous(e, exception)
            raise

        event.response = response

    def log_kernel_exception(self, event: ExceptionEvent) -> None:
        """Log the uncaught exception of *event* with its location."""
        e = event.exception
        self.log_exception(e, f'Uncaught exception {type(e).__name__}: "{e}" at {_location(e)}')

    def log_exception(self, exception: BaseException, message: str, level: Optional[int] = None) -> None:
        """Log *exception*; client HTTP errors as errors, everything else as critical unless *level* is given."""
        if level is None:
            if isinstance(exception, HTTPException) and exception.status_code < 500:
                level = logging.ERROR
            else:
                level = logging.CRITICAL
        self.logger.log(level, message, exc_info=exception)

    def duplicate_request(self, exception: BaseException, request: Request) -> Request:
        """Return a GET copy of *request* carrying the controller, exception and debug logger."""
        return duplicate_request(
            request,
            {
                "controller": self.controller,
                "exception": exception,
                "logger": self.debug_logger(),
            },
        )

    def debug_logger(self) -> Optional[logging.Logger]:
        if isinstance(self.logger, logging.Logger) and self.logger.isEnabledFor(logging.DEBUG):
            return self.logger
        return None


class ExceptionListener(BaseErrorListener):
    """Displays customized error pages for admin exceptions.

    Exceptions that are not :class:`~panelkit.exceptions.AdminError` are left
    to the host application.

    Args:
        templates: Engine rendering the error page.
        config: The admin configuration mapping, read for ``templates``
            overrides per entity and under ``design``.
        controller: Callable producing the error response. Defaults to
            :meth:`render_error_page`.
        logger: Logger for the uncaught exceptions.
        legacy_forwarding: Build and dispatch the error sub-request with the
            older forwarding procedure instead of the base listener.
    """

    def __init__(
        self,
        templates: TemplateEngine,
        config: Mapping[str, Any],
        controller: Optional[Callable[..., Response]] = None,
        logger: Optional[logging.Logger] = None,
        legacy_forwarding: bool = False,
    ) -> None:
        self.templates = templates
        self.config = config
        self.legacy_forwarding = legacy_forwarding
        super().__init__(controller if controller is not None else self.render_error_page, logger)

    @property
    def current_entity_name(self) -> Optional[str]:
        return _current_entity_name.get()

    def on_kernel_exception(self, event: ExceptionEvent) -> None:
        """Render an error page for admin exceptions.

        Records the ``entity`` query parameter of the request, then leaves
        non-admin exceptions alone. Admin exceptions are forwarded to the
        controller either by the base listener or by the legacy procedure.

        Args:
            event: The exception event; its ``response`` is set on success.

        Raises:
            Exception: Any failure of the error sub-request, re-raised with
                the original exception linked as its root cause.
        """
        exception = event.exception
        _current_entity_name.set(event.request.query_params.get("entity"))

        if not isinstance(exception, AdminError):
            return

        if not self.legacy_forwarding:
            super().on_kernel_exception(event)
        else:
            event.response = self._legacy_on_kernel_exception(event)

    def render_error_page(self, exception: Union[FlattenedException, BaseException]) -> Response:
        """Render the error page of *exception*.

        Templates are chosen for the current entity: entity override, then
        ``design.templates``, then the built-in pages.

        Args:
            exception: A flattened exception, or an exception to flatten.

        Returns:
            An HTML response with the exception's status code.
        """
        if not isinstance(exception, FlattenedException):
            exception = FlattenedException.create(exception)

        paths = template_paths(self.config, self.current_entity_name)
        content = self.templates.render(
            paths.exception,
            {
                "exception": exception,
                "layout_template_path": paths.layout,
            },
        )
        return HTMLResponse(content, status_code=exception.status_code, headers=exception.headers or None)

    def log_exception(self, exception: BaseException, message: str, level: Optional[int] = None) -> None:
        """Log *exception* with *message*.

        Admin exceptions are logged as critical from status 500 upwards and
        as errors below. Other exceptions follow the base listener policy.

        Args:
            exception: The exception to log.
            message: The log message.
            level: Explicit level, honoured for non-admin exceptions only.
        """
        if not isinstance(exception, AdminError):
            super().log_exception(exception, message, level)
            return

        if exception.status_code >= 500:
            self.logger.critical(message, exc_info=exception)
        else:
            self.logger.error(message, exc_info=exception)

    def duplicate_request(self, exception: BaseException, request: Request) -> Request:
        """Build the GET sub-request rendering *exception*.

        Args:
            exception: The exception being handled. Throwables that are not
                ``Exception`` are wrapped in ``RuntimeError`` first.
            request: The failing request, left untouched.

        Returns:
            The sub-request, whose ``exception`` attribute holds a
            :class:`FlattenedException`.
        """
        if not self.legacy_forwarding:
            request = super().duplicate_request(exception, request)
        else:
            request = self._legacy_duplicate_request(request)

        if not isinstance(exception, Exception):
            wrapped = RuntimeError(str(exception))
            wrapped.__cause__ = exception
            exception = wrapped
        request.state.exception = FlattenedException.create(exception)

        return request

    def _legacy_on_kernel_exception(self, event: ExceptionEvent) -> Response:
        exception = event.exception

        self.log_exception(
            exception,
            f'Uncaught exception {type(exception).__name__}: "{exception}" at {_location(exception)}',
        )

        request = self.duplicate_request(exception, event.request)

        try:
            return event.kernel.handle(request, SUB_REQUEST, catch=False)
        except Exception as e:
            self.log_exception(
                e,
                f"Exception thrown when handling an exception ({type(e).__name__}: {e} at {_location(e)})",
            )
            link_previous(e, exception)
            raise

    def _legacy_duplicate_request(self, request: Request) -> Request:
        return duplicate_request(
            request,
            {
                "controller": self.controller,
                "logger": self.debug_logger(),
                "format": request_format(request),
            },
        )
