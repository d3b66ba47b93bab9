"""HTTP dispatch layer built on FastAPI and Starlette routing.

Key components:
- **service**: Route registration and process startup
- **pipeline**: Per-request dispatch and response writing
- **controller**: The five-verb controller contract with reject-by-default base
- **request**: Per-request context with path variables and body decoding
- **responses**: Response envelope and its factory taxonomy
- **error_handler**: Conversion of escaped exceptions into responses
- **routing**: Path normalization and per-route dispatch tables
"""
