"""
Exception handlers for the Empowered Camps server.

Every error leaves the API as a JSON body with an ``error`` message.
"""

from .global_handler import setup_exception_handlers

__all__ = ["setup_exception_handlers"]
