"""Server-wide constants."""

PROJECT_NAME = "Empowered Camps Platform"
API_V1_STR = "/api/v1"
API_VERSION = "1.0.0"
SCHEMA_VERSION = "v1"
