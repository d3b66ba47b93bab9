"""Request identifier generation."""

import uuid

from restful.core.exceptions import IdentifierGenerationError


def generate_request_id() -> str:
    """Generate a unique identifier for one inbound request.

    Returns a UUID4 string, used to correlate the log lines of a request and
    exposed to controllers through the request context.

    Returns:
        str: A string representation of a UUID4.

    Raises:
        IdentifierGenerationError: If the OS randomness source is unavailable.

    Examples:
        >>> request_id = generate_request_id()
        >>> len(request_id)
        36
    """
    try:
        return str(uuid.uuid4())
    except (OSError, NotImplementedError) as e:
        raise IdentifierGenerationError(
            "Randomness source unavailable for request identifier", cause=e
        ) from e
