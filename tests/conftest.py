"""
Pytest Configuration and Fixtures

This module provides shared fixtures for all tests. The test doubles
themselves live in tests/helpers.py.
"""

import pytest
import pytest_asyncio
from typing import AsyncGenerator, List

from shardkv.network import connection as connection_module
from tests.helpers import FakeConnection, SocketFactory, StubServer, find_free_port


# ============================================================================
# Stub Server Fixtures
# ============================================================================

@pytest.fixture
def server_port() -> int:
    """Get a free port for server testing."""
    return find_free_port()


@pytest_asyncio.fixture
async def server(server_port: int) -> AsyncGenerator[StubServer, None]:
    """
    Start a stub store on a free port for the duration of a test.

    The server runs on the test's event loop, so blocking client calls
    must go through asyncio.to_thread().
    """
    srv = StubServer(port=server_port)
    await srv.start()

    yield srv

    await srv.stop()


@pytest_asyncio.fixture
async def shard_servers() -> AsyncGenerator[List[StubServer], None]:
    """Start three stub stores, one per shard."""
    servers = [StubServer() for _ in range(3)]
    for srv in servers:
        await srv.start()

    yield servers

    for srv in servers:
        await srv.stop()


# ============================================================================
# Fake Socket / Connection Fixtures
# ============================================================================

@pytest.fixture
def fake_sockets(monkeypatch):
    """
    Patch socket creation in the connection module.

    Usage:
        def test_x(fake_sockets):
            factory = fake_sockets(FakeSocket([b'2\\nok\\n\\n']))
            conn = Connection('127.0.0.1', 8888).connect()
    """
    def install(*sockets) -> SocketFactory:
        factory = SocketFactory(sockets)
        monkeypatch.setattr(connection_module.socket, "create_connection", factory)
        return factory
    return install


@pytest.fixture
def fake_connection_factory():
    """Factory fixture creating FakeConnection objects."""
    def factory(name: str = "fake", handler=None) -> FakeConnection:
        return FakeConnection(name, handler)
    return factory


# ============================================================================
# Pytest Configuration
# ============================================================================

def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
