"""Restful - convention-driven REST dispatch on top of FastAPI.

Restful maps a five-verb controller contract (create, get, update, delete,
list) onto collection and item URLs and normalizes how responses are built
and written.

Architecture Overview:
- **API Layer**: Service, dispatch pipeline, controllers and response envelopes
- **Core Layer**: Configuration, logging, request identifiers and exceptions

A service is assembled by registering controllers on a ``Service`` and then
either serving it with ``Service.forever`` or mounting ``Service.app`` in any
ASGI server.
"""

from restful.api.controller import Controller, ResourceController
from restful.api.request import RequestContext
from restful.api.responses import ResponseEnvelope
from restful.api.service import Service

__all__ = [
    "Controller",
    "RequestContext",
    "ResourceController",
    "ResponseEnvelope",
    "Service",
]
