"""Routes package for FastAPI endpoints.

This package contains all API route modules for the Routing Forms service.
"""

from routing_forms.routes import health, routing_forms

__all__ = ["health", "routing_forms"]
