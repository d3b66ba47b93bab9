"""Demonstration resources served by ``main.py``.

``WidgetController`` implements the full collection/item contract over an
in-memory store kept in the service context. ``JobController`` is exposed as
an action: ``POST /jobs/invoke`` submits a job and ``GET /jobs/invoke`` lists
the submitted ones.
"""

from __future__ import annotations

import asyncio
import uuid
from dataclasses import dataclass, field

from loguru import logger
from pydantic import BaseModel, Field

from restful.api.controller import Controller
from restful.api.request import RequestContext
from restful.api.responses import ResponseEnvelope
from restful.api.service import Service
from restful.core.config import Settings
from restful.core.exceptions import BodyDecodeError


class Widget(BaseModel):
    """A widget as accepted in request bodies."""

    name: str = Field(min_length=1)
    size: int = Field(default=0, ge=0)


class Job(BaseModel):
    """A job submitted through the jobs action."""

    command: str = Field(min_length=1)


@dataclass
class DemoContext:
    """State shared by all requests of the demo service."""

    widgets: dict[str, Widget] = field(default_factory=dict)
    jobs: list[Job] = field(default_factory=list)
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)


class WidgetController(Controller):
    """CRUD over the widgets stored in the service context."""

    def __init__(self) -> None:
        super().__init__("/widgets")

    async def create(self, request: RequestContext) -> ResponseEnvelope:
        try:
            widget = await request.decode_body(Widget)
        except BodyDecodeError as e:
            return ResponseEnvelope.unprocessable_entity(e.message)

        context: DemoContext = request.context
        widget_id = str(uuid.uuid4())
        async with context.lock:
            if any(existing.name == widget.name for existing in context.widgets.values()):
                return ResponseEnvelope.conflict()
            context.widgets[widget_id] = widget

        logger.info("Widget {} created", widget_id)
        return ResponseEnvelope.created(widget_id, self.location(widget_id))

    async def get(self, request: RequestContext) -> ResponseEnvelope:
        context: DemoContext = request.context
        widget = context.widgets.get(request.resource_id())
        if widget is None:
            return ResponseEnvelope.not_found()
        return ResponseEnvelope.json(widget)

    async def update(self, request: RequestContext) -> ResponseEnvelope:
        try:
            widget = await request.decode_body(Widget)
        except BodyDecodeError:
            return ResponseEnvelope.bad_request()

        context: DemoContext = request.context
        widget_id = request.resource_id()
        async with context.lock:
            if widget_id not in context.widgets:
                return ResponseEnvelope.not_found()
            context.widgets[widget_id] = widget
        return ResponseEnvelope.updated()

    async def delete(self, request: RequestContext) -> ResponseEnvelope:
        context: DemoContext = request.context
        async with context.lock:
            if context.widgets.pop(request.resource_id(), None) is None:
                return ResponseEnvelope.not_found()
        return ResponseEnvelope.deleted()

    async def list(self, request: RequestContext) -> ResponseEnvelope:
        context: DemoContext = request.context
        return ResponseEnvelope.json(
            {widget_id: widget.model_dump() for widget_id, widget in context.widgets.items()}
        )


class JobController(Controller):
    """Job submission exposed as an action endpoint."""

    def __init__(self) -> None:
        super().__init__("/jobs")

    async def create(self, request: RequestContext) -> ResponseEnvelope:
        try:
            job = await request.decode_body(Job)
        except BodyDecodeError as e:
            return ResponseEnvelope.unprocessable_entity(e.message)

        context: DemoContext = request.context
        async with context.lock:
            context.jobs.append(job)
        return ResponseEnvelope.plain(f"accepted {job.command}")

    async def list(self, request: RequestContext) -> ResponseEnvelope:
        context: DemoContext = request.context
        return ResponseEnvelope.json([job.model_dump() for job in context.jobs])


def create_service(settings: Settings | None = None) -> Service:
    """Build the demo service with its controllers registered.

    Args:
        settings: Optional settings instance passed to the service.

    Returns:
        Service: Service exposing widgets and the jobs action.
    """
    service = Service(context=DemoContext(), settings=settings)
    service.register_action(JobController())
    service.register(WidgetController())
    return service
