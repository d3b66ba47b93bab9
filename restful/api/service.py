"""Service assembly: controller registration and process startup.

A ``Service`` owns a FastAPI application, the shared context handed to every
request, and the routes installed for its controllers::

    service = Service(context=store)
    service.register_action(JobController())
    service.register(WidgetController())
    service.forever()

Routes are matched by Starlette in installation order, first match wins.
Register all controllers before serving; the route table is not meant to
change once requests are being handled.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import uvicorn
from fastapi import FastAPI
from loguru import logger

from restful.api.error_handler import register_exception_handlers
from restful.api.pipeline import RequestPipeline
from restful.api.routing import (
    ACTION_SEGMENT,
    ROUTED_METHODS,
    UUID_VARIABLE,
    RouteKind,
    normalize_collection_path,
    placeholder,
)
from restful.core.config import Settings, get_settings
from restful.core.exceptions import RouteConflictError

if TYPE_CHECKING:
    from loguru import Logger

    from restful.api.controller import ResourceController


@dataclass(frozen=True, slots=True)
class RouteRegistration:
    """Record of one route installed for a controller."""

    root_path: str
    path: str
    kind: RouteKind
    controller: ResourceController


class Service:
    """Registry of resource controllers served under one application.

    Args:
        context: Shared object handed to every request through its context.
        settings: Optional settings instance. If not provided, will use
            get_settings().
        log: Logger for the per-request lines. Defaults to the process logger
            bound with ``component="restful"``.
    """

    def __init__(
        self,
        context: Any = None,  # noqa: ANN401 - opaque, owned by the caller
        settings: Settings | None = None,
        log: Logger | None = None,
    ) -> None:
        self.context = context
        self.settings = settings if settings is not None else get_settings()
        self.log = log if log is not None else logger.bind(component="restful")
        self._routes: list[RouteRegistration] = []
        self._pipeline = RequestPipeline(self, self.log)

        self.app = FastAPI(
            title=self.settings.app_name,
            version=self.settings.app_version,
            debug=self.settings.debug,
            docs_url=None,
            redoc_url=None,
            openapi_url=None,
            redirect_slashes=self.settings.redirect_slashes,
        )
        register_exception_handlers(self.app, self)

    @property
    def routes(self) -> tuple[RouteRegistration, ...]:
        """Installed routes in installation order."""
        return tuple(self._routes)

    def register(self, controller: ResourceController) -> None:
        """Install the collection and item routes of ``controller``.

        ``GET``/``POST`` on ``root/`` call ``list``/``create``;
        ``GET``/``PUT``/``DELETE`` on ``root/{uuid}`` call
        ``get``/``update``/``delete``. Other methods answer 405.

        Args:
            controller: The controller to expose.

        Raises:
            RouteConflictError: If strict routing is enabled and one of the
                paths is already routed.
        """
        root = normalize_collection_path(controller.root_url())
        self._install(controller, root, root, RouteKind.COLLECTION)
        self._install(controller, root, root + placeholder(UUID_VARIABLE), RouteKind.ITEM)

    def register_action(self, controller: ResourceController) -> None:
        """Install the ``root/invoke`` action route of ``controller``.

        The action route dispatches like a collection: ``GET`` calls ``list``
        and ``POST`` calls ``create``. It must be registered before the
        controller's item route, which would otherwise match ``invoke`` as an
        item identifier.

        Args:
            controller: The controller to expose.

        Raises:
            RouteConflictError: If strict routing is enabled and the path is
                already routed.
        """
        root = normalize_collection_path(controller.root_url())
        path = root + ACTION_SEGMENT
        if any(
            route.kind is RouteKind.ITEM and route.root_path == root
            for route in self._routes
        ):
            self.log.warning(
                "Action route {} is shadowed by the item route of the same root",
                path,
            )
        self._install(controller, root, path, RouteKind.ACTION)

    def _install(
        self, controller: ResourceController, root: str, path: str, kind: RouteKind
    ) -> None:
        if any(route.path == path for route in self._routes):
            if self.settings.strict_routes:
                raise RouteConflictError(path)
            self.log.warning("Path {} is already routed, first registration wins", path)

        self.app.add_route(
            path,
            self._pipeline.endpoint(controller, kind),
            methods=list(ROUTED_METHODS),
            include_in_schema=False,
        )
        self._routes.append(RouteRegistration(root, path, kind, controller))
        self.log.debug("Registered {} route {}", kind.value, path)

    def forever(self, host: str | None = None, port: int | None = None) -> None:
        """Serve the application until the process is stopped.

        Args:
            host: Interface to bind. Defaults to the configured API host.
            port: Port to bind. Defaults to ``PORT`` from the environment,
                then the configured API port.
        """
        host = host or self.settings.api_host
        if port is None:
            port = int(os.environ.get("PORT", self.settings.api_port))

        self.log.info("Forever on {}:{}", host, port)
        uvicorn.run(self.app, host=host, port=port, log_config=None)
