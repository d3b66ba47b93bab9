"""URL conventions and dispatch tables for collection and item routes.

Every controller is exposed under a collection path ending in ``/``. Items
live one segment below it, addressed by the ``uuid`` path variable, and an
optional action endpoint sits at ``invoke`` next to the items.
"""

from enum import Enum
from typing import Final

SEPARATOR: Final[str] = "/"
UUID_VARIABLE: Final[str] = "uuid"
ACTION_SEGMENT: Final[str] = "invoke"

# Every route accepts all of these; the dispatch tables decide what gets a 405
ROUTED_METHODS: Final[tuple[str, ...]] = (
    "GET",
    "HEAD",
    "POST",
    "PUT",
    "PATCH",
    "DELETE",
    "OPTIONS",
)


class RouteKind(Enum):
    """Shape of a registered route."""

    COLLECTION = "collection"
    ITEM = "item"
    ACTION = "action"


# HTTP method -> controller operation name
COLLECTION_OPERATIONS: Final[dict[str, str]] = {
    "GET": "list",
    "POST": "create",
}
ITEM_OPERATIONS: Final[dict[str, str]] = {
    "GET": "get",
    "PUT": "update",
    "DELETE": "delete",
}

# Action endpoints behave as synthetic collections
DISPATCH_TABLES: Final[dict[RouteKind, dict[str, str]]] = {
    RouteKind.COLLECTION: COLLECTION_OPERATIONS,
    RouteKind.ITEM: ITEM_OPERATIONS,
    RouteKind.ACTION: COLLECTION_OPERATIONS,
}


def normalize_collection_path(path: str) -> str:
    """Return ``path`` with exactly one trailing separator.

    Args:
        path: A collection path such as ``/widgets``.

    Returns:
        str: ``"/"`` for an empty path, ``path`` itself when it already ends
            with the separator, ``path + "/"`` otherwise.

    Examples:
        >>> normalize_collection_path("/widgets")
        '/widgets/'
        >>> normalize_collection_path("")
        '/'
    """
    if not path:
        return SEPARATOR
    if path.endswith(SEPARATOR):
        return path
    return path + SEPARATOR


def placeholder(name: str) -> str:
    """Path template placeholder for the variable ``name``."""
    return "{" + name + "}"


def operation_for(kind: RouteKind, method: str) -> str | None:
    """Look up the controller operation serving ``method`` on a route kind.

    Args:
        kind: The kind of the matched route.
        method: The HTTP method of the request.

    Returns:
        str | None: The operation name, or None when the method is not
            served by this kind of route.
    """
    return DISPATCH_TABLES[kind].get(method.upper())
