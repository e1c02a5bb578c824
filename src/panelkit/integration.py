"""Hooks the error listener into a Starlette application."""

from typing import Callable, Optional

from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import Response

from panelkit.exceptions import AdminError
from panelkit.kernel import ExceptionEvent, HttpKernel
from panelkit.listener import ExceptionListener


def install_error_pages(
    app: Starlette,
    listener: ExceptionListener,
    kernel: Optional[HttpKernel] = None,
) -> Callable[[Request, Exception], Response]:
    """Render :class:`AdminError` exceptions raised by *app* as error pages.

    When the listener leaves the event without a response, the exception is
    raised again so Starlette's default handling applies.
    """
    kernel = kernel if kernel is not None else HttpKernel(listener.logger)

    def handle_admin_error(request: Request, exc: Exception) -> Response:
        event = ExceptionEvent(kernel=kernel, request=request, exception=exc)
        listener.on_kernel_exception(event)
        if not event.has_response:
            raise exc
        return event.response

    app.add_exception_handler(AdminError, handle_admin_error)
    return handle_admin_error
