"""Per-request context handed to controller operations."""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import TYPE_CHECKING, Any, overload

import orjson
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from starlette.requests import Request

from restful.api.routing import UUID_VARIABLE
from restful.core.exceptions import BodyDecodeError

if TYPE_CHECKING:
    from restful.api.service import Service


class RequestContext:
    """Bundle of request identity, shared service state and the HTTP request.

    One context is built for each inbound request before the controller is
    called and is never shared between requests.

    Args:
        request_id: Unique identifier of this request.
        service: The service that dispatched the request.
        http_request: The Starlette request being served.
    """

    __slots__ = ("_http_request", "_request_id", "_service")

    def __init__(self, request_id: str, service: Service, http_request: Request) -> None:
        self._request_id = request_id
        self._service = service
        self._http_request = http_request

    @property
    def request_id(self) -> str:
        return self._request_id

    @property
    def service(self) -> Service:
        return self._service

    @property
    def context(self) -> Any:  # noqa: ANN401 - owned by the service, opaque here
        """The service-wide shared context object."""
        return self._service.context

    @property
    def http_request(self) -> Request:
        return self._http_request

    def vars(self) -> dict[str, str]:
        """All path variables bound by the matched route."""
        return {
            name: str(value) for name, value in self._http_request.path_params.items()
        }

    def variable(self, name: str) -> str:
        """Return the path variable ``name``, or an empty string when unbound."""
        value = self._http_request.path_params.get(name)
        return "" if value is None else str(value)

    def resource_id(self) -> str:
        """Identifier of the addressed item on item routes."""
        return self.variable(UUID_VARIABLE)

    def stream(self) -> AsyncIterator[bytes]:
        """Iterate over the raw request body chunks as they arrive."""
        return self._http_request.stream()

    @overload
    async def decode_body(self, model: None = None) -> Any: ...  # noqa: ANN401

    @overload
    async def decode_body[M: BaseModel](self, model: type[M]) -> M: ...

    async def decode_body(self, model: type[BaseModel] | None = None) -> Any:
        """Decode the JSON request body.

        Args:
            model: Optional Pydantic model class the payload is validated into.

        Returns:
            Any: The decoded JSON value, or a ``model`` instance.

        Raises:
            BodyDecodeError: If the body is not valid JSON or does not
                validate against ``model``.
        """
        body = await self._http_request.body()

        try:
            payload = orjson.loads(body)
        except orjson.JSONDecodeError as e:
            raise BodyDecodeError(
                f"Malformed JSON body: {e}",
                context={"request_id": self._request_id},
                cause=e,
            ) from e

        if model is None:
            return payload

        try:
            return model.model_validate(payload)
        except PydanticValidationError as e:
            raise BodyDecodeError(
                f"Body does not match {model.__name__}",
                context={
                    "request_id": self._request_id,
                    "errors": e.errors(include_url=False),
                },
                cause=e,
            ) from e
