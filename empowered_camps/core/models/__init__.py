"""Core models: domain enums and API I/O schemas."""
