"""
I/O models: pydantic request and response schemas for the HTTP API.
"""
