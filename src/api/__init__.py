"""HTTP API layer built on FastAPI.

Key components:
- **main**: Application factory and lifecycle management
- **routes**: One CRUD router per entity from a single factory, plus the
  health and info endpoints
- **dependencies**: Wiring from the request session to the entity services
- **middleware**: Security headers, correlation IDs, request logging and
  exception handlers
- **schemas**: Error, message, health and info response bodies
- **utils**: orjson response class
"""
