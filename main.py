"""Main entry point for running the demo restful service."""

from restful.core.config import get_settings
from restful.core.logging import setup_logging
from restful.demo import create_service


def main() -> None:
    """Main entry point for the demo service."""
    settings = get_settings()

    # Setup logging first
    setup_logging(settings)

    create_service(settings).forever()


if __name__ == "__main__":
    main()
