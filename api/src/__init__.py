"""FastAPI service for query-credential authorization checks.

This package provides the single GET /test endpoint, its request logging
middleware and the server entry point.
"""

__version__ = "1.0.0"
