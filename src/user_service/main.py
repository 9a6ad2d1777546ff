"""ASGI entrypoint: ``uvicorn user_service.main:app``."""

from user_service.api.fastapi import create_app

app = create_app()
