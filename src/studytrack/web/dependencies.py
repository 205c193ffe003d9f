"""Request-scoped access to the store handle and configuration.

Both live on ``app.state`` for the lifetime of the application.
"""

from fastapi import Request

from studytrack.config.app_config import AppConfig
from studytrack.db.database import Database


def get_database(request: Request) -> Database:
    return request.app.state.db


def get_config(request: Request) -> AppConfig:
    return request.app.state.config
