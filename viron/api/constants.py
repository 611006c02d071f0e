"""API-related constants."""

HTTP_500_INTERNAL_SERVER_ERROR = 500

CORRELATION_ID_HEADER = "X-Correlation-ID"
REQUEST_ID_HEADER = "X-Request-ID"
