"""Per-request dispatch from a matched route to a controller operation.

Each registered route gets an endpoint built by ``RequestPipeline``. For every
request the endpoint:

1. Generates a request id and builds the ``RequestContext``
2. Logs the received request
3. Selects the controller operation from the route kind's dispatch table,
   answering 405 itself when the method is not served
4. Converts any exception raised by the operation into a plain-text 500
5. Logs the outcome and renders the envelope onto the transport

The whole dispatch runs inside ``logger.contextualize(request_id=...)`` so
anything a controller logs carries the request id.
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, cast

from starlette.concurrency import run_in_threadpool
from starlette.requests import Request
from starlette.responses import Response

from restful.api.controller import ResourceController
from restful.api.error_handler import log_dispatch_error
from restful.api.request import RequestContext
from restful.api.responses import ResponseEnvelope
from restful.api.routing import RouteKind, operation_for
from restful.core.context import generate_request_id
from restful.core.exceptions import IdentifierGenerationError

if TYPE_CHECKING:
    from loguru import Logger

    from restful.api.service import Service

type Endpoint = Callable[[Request], Awaitable[Response]]


class RequestPipeline:
    """Builds route endpoints that dispatch requests to a controller.

    Args:
        service: The service owning the routes and the shared context.
        log: Logger receiving the per-request log lines.
    """

    def __init__(self, service: Service, log: Logger) -> None:
        self._service = service
        self.log = log

    def endpoint(self, controller: ResourceController, kind: RouteKind) -> Endpoint:
        """Build the endpoint serving ``kind`` routes of ``controller``.

        Args:
            controller: The controller requests are dispatched to.
            kind: Shape of the route the endpoint is installed on.

        Returns:
            Endpoint: Starlette request/response endpoint.
        """

        async def handle(http_request: Request) -> Response:
            return await self.dispatch(controller, kind, http_request)

        handle.__name__ = f"{type(controller).__name__}_{kind.value}"
        return handle

    async def dispatch(
        self, controller: ResourceController, kind: RouteKind, http_request: Request
    ) -> Response:
        """Run one request through the pipeline.

        Args:
            controller: The controller owning the matched route.
            kind: Shape of the matched route.
            http_request: The inbound request.

        Returns:
            Response: The rendered response envelope.

        Raises:
            IdentifierGenerationError: If no request id can be generated.
                Failures of the controller operation are never raised; they
                are answered with a 500.
        """
        try:
            request_id = generate_request_id()
        except IdentifierGenerationError as e:
            self.log.critical(
                "Cannot dispatch request without an identifier: {}",
                e.message,
                method=http_request.method,
                url=str(http_request.url),
            )
            raise

        http_request.state.request_id = request_id
        request = RequestContext(request_id, self._service, http_request)

        with self.log.contextualize(request_id=request_id):
            self.log.info(
                "Request received",
                request_id=request_id,
                method=http_request.method,
                url=str(http_request.url),
            )

            try:
                envelope = await self.invoke(controller, kind, request)
            except Exception as e:
                envelope = log_dispatch_error(self.log, e, http_request)
            return self.send(request, envelope)

    async def invoke(
        self, controller: ResourceController, kind: RouteKind, request: RequestContext
    ) -> ResponseEnvelope:
        """Call the operation the dispatch table assigns to the request method.

        Args:
            controller: The controller owning the matched route.
            kind: Shape of the matched route.
            request: Context of the request being served.

        Returns:
            ResponseEnvelope: The operation's envelope, or 405 when the method
                has no operation on this route kind.
        """
        operation_name = operation_for(kind, request.http_request.method)
        if operation_name is None:
            return ResponseEnvelope.method_not_allowed()

        operation = getattr(controller, operation_name)
        if inspect.iscoroutinefunction(operation):
            return cast("ResponseEnvelope", await operation(request))
        return cast("ResponseEnvelope", await run_in_threadpool(operation, request))

    def send(self, request: RequestContext, envelope: ResponseEnvelope) -> Response:
        """Log the outcome of a request and render its envelope.

        Args:
            request: Context of the request being answered.
            envelope: The response to write.

        Returns:
            Response: The Starlette response for the transport.
        """
        self.log.info(
            "Response sent",
            request_id=request.request_id,
            status_code=envelope.status_code,
        )
        return envelope.render()
