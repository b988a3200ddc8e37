import pytest


@pytest.fixture
def anyio_backend():
    # The poller is built on asyncio primitives.
    return "asyncio"
