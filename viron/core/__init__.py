"""Cross-cutting infrastructure shared by every layer of Viron.

- **config**: Settings loaded from the environment and ``.env``
- **context**: Correlation ID storage for the current request
- **exceptions**: Error codes, severities and the ``VironError`` hierarchy
- **error_context**: Redaction of sensitive values before they are logged
- **logging**: Loguru setup with console and structured formatters
- **observability**: OpenTelemetry tracing helpers
"""
