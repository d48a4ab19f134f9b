"""Core domain layer: database, models, logging, monitoring and errors."""
