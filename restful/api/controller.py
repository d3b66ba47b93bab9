"""Controller contract for resources served by a restful service.

A controller exposes five operations. Collection routes call ``list`` and
``create``; item routes call ``get``, ``update`` and ``delete``. Operations
may be plain functions or coroutines; plain functions run in a worker thread.

``Controller`` answers every operation with 405 Method Not Allowed, so a
concrete resource only overrides what it supports::

    class WidgetController(Controller):
        def __init__(self, store: dict[str, Widget]) -> None:
            super().__init__("/widgets")
            self.store = store

        async def get(self, request: RequestContext) -> ResponseEnvelope:
            widget = self.store.get(request.resource_id())
            if widget is None:
                return ResponseEnvelope.not_found()
            return ResponseEnvelope.json(widget)

Several requests may call the same controller instance concurrently; any
mutable state it holds must be protected by the controller itself.
"""

from __future__ import annotations

from collections.abc import Awaitable
from typing import Protocol, runtime_checkable

from restful.api.request import RequestContext
from restful.api.responses import ResponseEnvelope
from restful.api.routing import normalize_collection_path

type OperationResult = ResponseEnvelope | Awaitable[ResponseEnvelope]


@runtime_checkable
class ResourceController(Protocol):
    """Capabilities a registered controller must provide."""

    def root_url(self) -> str:
        """Collection path of the resource, ending with ``/``."""
        ...

    def create(self, request: RequestContext) -> OperationResult:
        """Create a resource in the collection."""
        ...

    def get(self, request: RequestContext) -> OperationResult:
        """Fetch one item."""
        ...

    def update(self, request: RequestContext) -> OperationResult:
        """Replace one item."""
        ...

    def delete(self, request: RequestContext) -> OperationResult:
        """Remove one item."""
        ...

    def list(self, request: RequestContext) -> OperationResult:
        """List the collection."""
        ...


class Controller:
    """Reject-by-default base for resource controllers.

    Args:
        url: Root path of the resource; normalized to end with ``/``.
    """

    def __init__(self, url: str = "") -> None:
        self._url = url

    @property
    def url(self) -> str:
        return self._url

    def root_url(self) -> str:
        return normalize_collection_path(self._url)

    def location(self, resource_id: str) -> str:
        """URL of the item ``resource_id``, used for Location headers."""
        return self.root_url() + resource_id

    async def create(self, request: RequestContext) -> ResponseEnvelope:
        return ResponseEnvelope.method_not_allowed()

    async def get(self, request: RequestContext) -> ResponseEnvelope:
        return ResponseEnvelope.method_not_allowed()

    async def update(self, request: RequestContext) -> ResponseEnvelope:
        return ResponseEnvelope.method_not_allowed()

    async def delete(self, request: RequestContext) -> ResponseEnvelope:
        return ResponseEnvelope.method_not_allowed()

    async def list(self, request: RequestContext) -> ResponseEnvelope:
        return ResponseEnvelope.method_not_allowed()
