"""Unit tests for restful/api/request.py."""

import pytest
from pydantic import BaseModel

from restful.api.request import RequestContext
from restful.api.service import Service
from restful.core.exceptions import BodyDecodeError

from tests.unit.conftest import RequestFactory


class Payload(BaseModel):
    """Model used to validate request bodies."""

    name: str
    size: int


@pytest.mark.unit
class TestRequestContext:
    """Test suite for RequestContext."""

    def test_identity_and_shared_context(
        self, service: Service, make_http_request: RequestFactory
    ) -> None:
        """Test the context exposes the request id and service state."""
        http_request = make_http_request()
        request = RequestContext("req-1", service, http_request)

        assert request.request_id == "req-1"
        assert request.service is service
        assert request.context == {"name": "shared"}
        assert request.http_request is http_request

    def test_variable_returns_bound_value(
        self, service: Service, make_http_request: RequestFactory
    ) -> None:
        """Test path variables are read from the route match."""
        request = RequestContext(
            "r", service, make_http_request(path_params={"uuid": "abc", "n": 3})
        )

        assert request.variable("uuid") == "abc"
        assert request.variable("n") == "3"
        assert request.resource_id() == "abc"
        assert request.vars() == {"uuid": "abc", "n": "3"}

    def test_variable_missing_is_empty_string(
        self, service: Service, make_http_request: RequestFactory
    ) -> None:
        """Test unbound variables read as an empty string."""
        request = RequestContext("r", service, make_http_request())

        assert request.variable("uuid") == ""
        assert request.resource_id() == ""
        assert request.vars() == {}

    async def test_decode_body_json(
        self, service: Service, make_http_request: RequestFactory
    ) -> None:
        """Test JSON bodies decode to Python values."""
        request = RequestContext(
            "r", service, make_http_request("POST", body=b'{"name": "w", "size": 2}')
        )

        assert await request.decode_body() == {"name": "w", "size": 2}

    async def test_decode_body_into_model(
        self, service: Service, make_http_request: RequestFactory
    ) -> None:
        """Test bodies validate into the requested model."""
        request = RequestContext(
            "r", service, make_http_request("POST", body=b'{"name": "w", "size": 2}')
        )

        payload = await request.decode_body(Payload)

        assert payload == Payload(name="w", size=2)

    @pytest.mark.parametrize("body", [b"", b"{not json", b'{"name": '])
    async def test_malformed_body_raises(
        self, body: bytes, service: Service, make_http_request: RequestFactory
    ) -> None:
        """Test malformed JSON is surfaced to the caller."""
        request = RequestContext("r", service, make_http_request("POST", body=body))

        with pytest.raises(BodyDecodeError) as exc_info:
            await request.decode_body()

        assert exc_info.value.context == {"request_id": "r"}
        assert exc_info.value.cause is not None

    async def test_invalid_model_raises(
        self, service: Service, make_http_request: RequestFactory
    ) -> None:
        """Test validation failures are surfaced with their details."""
        request = RequestContext(
            "r", service, make_http_request("POST", body=b'{"name": "w"}')
        )

        with pytest.raises(BodyDecodeError) as exc_info:
            await request.decode_body(Payload)

        assert "Payload" in exc_info.value.message
        errors = exc_info.value.context["errors"]
        assert errors[0]["loc"] == ("size",)

    async def test_stream_yields_body(
        self, service: Service, make_http_request: RequestFactory
    ) -> None:
        """Test the raw body can be consumed incrementally."""
        request = RequestContext(
            "r", service, make_http_request("POST", body=b"chunked")
        )

        chunks = [chunk async for chunk in request.stream()]

        assert b"".join(chunks) == b"chunked"
