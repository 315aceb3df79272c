# app/api/__init__.py
"""HTTP layer: dependencies and versioned routers."""
