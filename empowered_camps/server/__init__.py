"""
Empowered Camps Server Package.

Subpackages:
    api: FastAPI route definitions, one module per resource.
    auth: Token verification and role checks.
    core: Server configuration and constants.
    services: Business logic behind the endpoints.
    middleware: Request tracing.
    exception_handlers: Mapping of errors to JSON responses.
"""
