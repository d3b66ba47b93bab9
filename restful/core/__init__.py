"""Core infrastructure shared by the dispatch layer.

- **config**: Settings with environment and ``.env`` support
- **context**: Per-request identifier generation
- **exceptions**: Structured exception hierarchy with error codes
- **logging**: Loguru setup with console and JSON formatters
"""
