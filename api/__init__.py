"""
FastAPI RESTful API for the Library book catalogue.

This package provides:
- CRUD endpoints for book records keyed by title
- MongoDB storage with a unique book code
- OpenAPI documentation served at /api-docs
"""
