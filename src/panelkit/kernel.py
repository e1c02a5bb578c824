"""Minimal sub-request handling on top of Starlette requests.

Starlette routes the main request; error pages are produced by dispatching
a duplicated request straight to a controller callable stored in the
request attributes (``request.state``).
"""

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional

from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response

MAIN_REQUEST = 1
SUB_REQUEST = 2


@dataclass
class ExceptionEvent:
    """An uncaught exception travelling through the error listeners."""

    kernel: "HttpKernel"
    request: Request
    exception: BaseException
    response: Optional[Response] = None

    @property
    def has_response(self) -> bool:
        return self.response is not None


def request_format(request: Request, default: str = "html") -> str:
    """Guess the response format of *request*.

    The ``_format`` query parameter wins, then a JSON ``Accept`` header.
    """
    explicit = request.query_params.get("_format")
    if explicit:
        return explicit
    if "application/json" in request.headers.get("accept", ""):
        return "json"
    return default


def duplicate_request(request: Request, attributes: Mapping[str, Any]) -> Request:
    """Copy *request* as a GET request carrying exactly *attributes*."""
    scope = dict(request.scope)
    scope["method"] = "GET"
    scope["state"] = dict(attributes)
    return Request(scope)


class HttpKernel:
    """Dispatches requests to the controller found in their attributes."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self.logger = logger if logger is not None else logging.getLogger(__name__)

    def handle(self, request: Request, request_type: int = MAIN_REQUEST, catch: bool = True) -> Response:
        """Call the request's controller and return its response.

        Args:
            request: A request whose attributes hold a ``controller``.
            request_type: ``MAIN_REQUEST`` or ``SUB_REQUEST``.
            catch: When true, failures become a plain 500 response instead
                of propagating.
        """
        try:
            return self._handle_raw(request, request_type)
        except Exception as exc:
            if not catch:
                raise
            self.logger.critical(
                "Uncaught exception while handling %s: %s", request.url.path, exc, exc_info=exc
            )
            return PlainTextResponse("Internal Server Error", status_code=500)

    def _handle_raw(self, request: Request, request_type: int) -> Response:
        attributes: Dict[str, Any] = request.scope.get("state", {})
        controller = attributes.get("controller")
        if controller is None:
            raise LookupError(f'Unable to find the controller for path "{request.url.path}".')

        self.logger.debug(
            "Dispatching %s to %r",
            "sub-request" if request_type == SUB_REQUEST else "request",
            controller,
        )
        response = controller(**self._controller_arguments(controller, request, attributes))
        if not isinstance(response, Response):
            raise TypeError(
                f"The controller must return a Response object, {type(response).__name__} given."
            )
        return response

    @staticmethod
    def _controller_arguments(
        controller: Callable[..., Any],
        request: Request,
        attributes: Mapping[str, Any],
    ) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {}
        for name, param in inspect.signature(controller).parameters.items():
            if name == "request":
                kwargs[name] = request
            elif name in attributes:
                kwargs[name] = attributes[name]
            elif param.default is inspect.Parameter.empty:
                raise RuntimeError(
                    f'Controller {controller!r} requires that you provide a value for the "{name}" argument.'
                )
        return kwargs
