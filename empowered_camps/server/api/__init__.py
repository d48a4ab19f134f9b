"""HTTP API of the Empowered Camps server."""
