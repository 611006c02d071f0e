"""Core application constants."""

MILLISECONDS_PER_SECOND = 1000

REDACTED = "[REDACTED]"

# HSTS max-age (1 year)
DEFAULT_HSTS_MAX_AGE = 31536000
