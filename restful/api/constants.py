"""API-related constants."""

# HTTP Status Codes emitted by response envelopes
HTTP_200_OK = 200
HTTP_201_CREATED = 201
HTTP_400_BAD_REQUEST = 400
HTTP_404_NOT_FOUND = 404
HTTP_405_METHOD_NOT_ALLOWED = 405
HTTP_409_CONFLICT = 409
HTTP_422_UNPROCESSABLE_ENTITY = 422
HTTP_500_INTERNAL_SERVER_ERROR = 500

# HTTP Headers
LOCATION_HEADER = "Location"
UUID_HEADER = "X-UUID"

# Content types
APPLICATION_JSON = "application/json"
PLAIN_TEXT = "text/plain"
