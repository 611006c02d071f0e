"""Cross-cutting request/response middleware.

Order of execution for an incoming request:
1. ``SecurityHeadersMiddleware`` (outermost, so every response gets headers)
2. ``RequestContextMiddleware`` (correlation id)
3. ``RequestLoggingMiddleware`` (logs with the correlation id bound)

Exception handlers live in ``error_handler`` and are registered on the app.
"""
