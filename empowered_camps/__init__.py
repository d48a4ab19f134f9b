"""Empowered Camps platform.

Backend for a franchised youth sports camp business. HQ licenses territories
to licensees, who run camp sessions that parents register and pay for.

Subpackages
-----------

- ``empowered_camps.core``: database entities and repositories, domain enums,
  request/response models, money helpers, logging, monitoring and errors.
- ``empowered_camps.server``: the FastAPI application, its authentication,
  business services and HTTP endpoints.
"""
