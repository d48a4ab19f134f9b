"""Version 1 API routers, one module per resource."""
