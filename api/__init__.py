"""
Module 02 - Intake API (FastAPI)

HTTP surface of the Instabot gateway:
- POST <server.url> - Submit a signed command
- GET <server.healthCheck> - Liveness probe

Usage:
    uvicorn --factory api.app:create_app
"""

__version__ = "0.1.0"
