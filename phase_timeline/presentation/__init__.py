"""
Presentation layer.

FastAPI routes, schemas, WebSocket streaming and HTTP middleware.
"""
