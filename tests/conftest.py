import pytest
import pytest_asyncio

from ctcp_courier.config.model import CtcpSettings
from ctcp_courier.ctcp.listener import CtcpListener
from ctcp_courier.ctcp.models import Sender
from ctcp_courier.ctcp.registry import HandlerRegistry
from ctcp_courier.ctcp.scheduler import ReplySchedulerRegistry
from tests.fixtures.connections import RecordingConnection


@pytest.fixture
def connection() -> RecordingConnection:
    return RecordingConnection()


@pytest.fixture
def sender() -> Sender:
    return Sender(nick="alice", user="al", host="example.org")


@pytest.fixture
def fast_settings() -> CtcpSettings:
    return CtcpSettings(
        reply_queue_size=10,
        reply_rate=0.01,
        client_name="TestClient",
        client_version="1.2",
        source_url="https://example.org/src",
    )


@pytest_asyncio.fixture
async def schedulers(fast_settings):
    registry = ReplySchedulerRegistry(fast_settings)
    yield registry
    await registry.close_all()


@pytest_asyncio.fixture
async def listener(schedulers):
    return CtcpListener(HandlerRegistry(), schedulers)
