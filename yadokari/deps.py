# yadokari/deps.py
from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.engine import make_url

from yadokari.config import AppConfig
from yadokari.tasks import TaskDispatcher


def build_engine(database_url: str) -> Engine:
    """Single engine for the process."""
    if make_url(database_url).get_backend_name() == "sqlite":
        return create_engine(database_url, future=True)
    return create_engine(
        database_url,
        future=True,
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=10,
    )


def get_config(request: Request) -> AppConfig:
    return request.app.state.config


def get_dispatcher(request: Request) -> TaskDispatcher:
    return request.app.state.dispatcher
