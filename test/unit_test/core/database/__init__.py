"""Unit tests for the database entities and repositories."""
