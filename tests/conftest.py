import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from yadokari.config import AppConfig
from yadokari.sql import init_db
from tests.fakes import FakeNotifier, FakeSource


@pytest.fixture
def config() -> AppConfig:
    return AppConfig(
        verification_token="s3cret",
        bot_token="xoxb-test",
        bot_user="UBOT",
        region_code="13",
        database_url="sqlite://",
    )


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def source() -> FakeSource:
    return FakeSource()


@pytest.fixture
def notifier() -> FakeNotifier:
    return FakeNotifier()
