"""Response envelopes and the taxonomy of standard outcomes.

A ``ResponseEnvelope`` describes a complete HTTP response before it reaches
the transport. Controllers build envelopes through the factory classmethods,
and the dispatch pipeline renders them into Starlette responses.

JSON bodies are produced with orjson, which natively handles datetime, UUID
and dataclass values; Pydantic models are dumped before serialization and keys
are sorted for predictable output. Models nested in lists or dicts are dumped
through the orjson ``default`` hook.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import orjson
from pydantic import BaseModel
from pydantic_core import PydanticSerializationError
from starlette.responses import Response

from restful.api import constants as status
from restful.api.constants import (
    APPLICATION_JSON,
    LOCATION_HEADER,
    PLAIN_TEXT,
    UUID_HEADER,
)


def _default(obj: Any) -> Any:  # noqa: ANN401 - orjson default hook
    if isinstance(obj, BaseModel):
        return obj.model_dump(mode="json")
    raise TypeError(f"Type is not JSON serializable: {type(obj).__name__}")


@dataclass(frozen=True, slots=True)
class ResponseEnvelope:
    """Immutable description of an HTTP response.

    Attributes:
        status_code: HTTP status code.
        content_type: Value of the Content-Type header, if any.
        location: Value of the Location header, if any.
        resource_id: Identifier of the affected resource, sent as X-UUID.
        body: Raw response body; empty for most outcomes.
    """

    status_code: int
    content_type: str | None = None
    location: str | None = None
    resource_id: str | None = None
    body: bytes = b""

    @classmethod
    def created(cls, resource_id: str, location: str) -> ResponseEnvelope:
        """201 with the new resource's Location and identifier headers."""
        return cls(
            status.HTTP_201_CREATED, location=location, resource_id=resource_id
        )

    @classmethod
    def updated(cls) -> ResponseEnvelope:
        """201 with an empty body.

        Status 201 rather than 200/204 is kept for compatibility with existing
        clients.
        """
        return cls(status.HTTP_201_CREATED)

    @classmethod
    def deleted(cls) -> ResponseEnvelope:
        """201 with an empty body, see :meth:`updated`."""
        return cls(status.HTTP_201_CREATED)

    @classmethod
    def bad_request(cls) -> ResponseEnvelope:
        return cls(status.HTTP_400_BAD_REQUEST)

    @classmethod
    def internal_server_error(cls, info: str) -> ResponseEnvelope:
        """500 carrying ``info`` as a plain-text body."""
        return cls(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            content_type=PLAIN_TEXT,
            body=info.encode(),
        )

    @classmethod
    def not_found(cls) -> ResponseEnvelope:
        return cls(status.HTTP_404_NOT_FOUND)

    @classmethod
    def conflict(cls) -> ResponseEnvelope:
        return cls(status.HTTP_409_CONFLICT)

    @classmethod
    def method_not_allowed(cls) -> ResponseEnvelope:
        return cls(status.HTTP_405_METHOD_NOT_ALLOWED)

    @classmethod
    def unprocessable_entity(cls, message: str) -> ResponseEnvelope:
        """422 carrying ``message`` as the body, without a content type."""
        return cls(status.HTTP_422_UNPROCESSABLE_ENTITY, body=message.encode())

    @classmethod
    def plain(cls, text: str) -> ResponseEnvelope:
        """200 with a plain-text body."""
        return cls(status.HTTP_200_OK, content_type=PLAIN_TEXT, body=text.encode())

    @classmethod
    def json(cls, value: Any) -> ResponseEnvelope:  # noqa: ANN401 - any JSON-serializable value
        """200 with ``value`` serialized as JSON.

        Serialization failures are not raised: they produce a 500 envelope
        whose plain-text body is the encoder's error message.

        Args:
            value: The value to serialize. Pydantic models are dumped, also
                when nested in containers.

        Returns:
            ResponseEnvelope: The JSON response, or an internal server error.
        """
        try:
            if isinstance(value, BaseModel):
                value = value.model_dump(mode="json")
            content = orjson.dumps(value, default=_default, option=orjson.OPT_SORT_KEYS)
        except (orjson.JSONEncodeError, PydanticSerializationError) as e:
            return cls.internal_server_error(str(e))

        return cls(status.HTTP_200_OK, content_type=APPLICATION_JSON, body=content)

    @property
    def headers(self) -> dict[str, str]:
        """Location and identifier headers carried by this envelope."""
        headers: dict[str, str] = {}
        if self.location:
            headers[LOCATION_HEADER] = self.location
        if self.resource_id:
            headers[UUID_HEADER] = self.resource_id
        return headers

    def render(self) -> Response:
        """Build the Starlette response written to the transport.

        Returns:
            Response: Response with Content-Type, Location and X-UUID set only
                when present on the envelope.
        """
        return Response(
            content=self.body,
            status_code=self.status_code,
            headers=self.headers,
            media_type=self.content_type,
        )
