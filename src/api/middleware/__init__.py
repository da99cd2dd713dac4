"""FastAPI middleware and exception handlers.

- **SecurityHeadersMiddleware**: Adds security headers (HSTS, X-Frame-Options, etc.)
- **RequestContextMiddleware**: Manages correlation IDs
- **RequestLoggingMiddleware**: Request logging with slow request detection
- **error_handler**: Maps exceptions to ``{"message": ...}`` responses
"""
