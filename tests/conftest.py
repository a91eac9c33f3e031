import httpx
import pytest
import pytest_asyncio

from api_client import ApiClient
from utils.storage import MemoryCredentialStore
from helpers import FakeBackend

BASE_URL = "http://testserver"


@pytest.fixture
def store():
    """Store holding the A1/R1 session"""
    return MemoryCredentialStore("A1", "R1")


@pytest.fixture
def backend():
    """Backend accepting A1 and rotating R1 -> A2/R2"""
    return FakeBackend(valid_access={"A1"}, rotations={"R1": ("A2", "R2")})


@pytest_asyncio.fixture
async def make_client():
    """Factory for ApiClients wired to a handler through httpx.MockTransport"""
    clients = []

    def factory(handler, storage=None, timeout_ms=2000, **kwargs):
        client = ApiClient(
            base_url=BASE_URL,
            timeout_ms=timeout_ms,
            storage=storage if storage is not None else MemoryCredentialStore(),
            transport=httpx.MockTransport(handler),
            **kwargs,
        )
        clients.append(client)
        return client

    yield factory

    for client in clients:
        await client.aclose()
