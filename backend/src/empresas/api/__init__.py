"""
HTTP API - FastAPI routes, schemas and dependencies.
"""
