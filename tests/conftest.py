import asyncio
import time
import uuid
from datetime import datetime

import pytest
from dependency_injector import providers
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketState

from price_alerts.catalog import ProductCatalog, SqlProductCatalog
from price_alerts.config import Settings
from price_alerts.container import Container
from price_alerts.db.sessions import create_db_engine, init_db
from price_alerts.main import create_app
from price_alerts.security import create_access_token
from price_alerts.store import AlertStore, AnonymousAlertStore
from price_alerts.transport import ConnectionRegistry, EmailTransport

JWT_SECRET = "test-secret"
NOON = datetime(2026, 3, 2, 12, 0)


class FakeWebSocket:
    """Records what the registry sends; can be told to fail or to look closed."""

    def __init__(self, fail: bool = False, connected: bool = True):
        self.sent = []
        self.fail = fail
        self.client_state = WebSocketState.CONNECTED if connected else WebSocketState.DISCONNECTED

    async def send_json(self, message):
        if self.fail:
            raise RuntimeError("socket closed")
        self.sent.append(message)


class SlowCatalog(ProductCatalog):
    """Blocks on every lookup like a catalog stuck on the network."""

    def __init__(self, inner, delay=0.3):
        self.inner = inner
        self.delay = delay
        self.calls = 0

    def get_product(self, product_id):
        self.calls += 1
        time.sleep(self.delay)
        return self.inner.get_product(product_id)


async def _longest_stall(coro, tick=0.02):
    """Await coro while a ticker records the longest gap between its ticks."""
    gaps = []
    done = asyncio.Event()

    async def ticker():
        last = time.monotonic()
        while not done.is_set():
            await asyncio.sleep(tick)
            now = time.monotonic()
            gaps.append(now - last)
            last = now

    task = asyncio.create_task(ticker())
    try:
        result = await coro
    finally:
        done.set()
        await task
    return result, max(gaps, default=0.0)


class RecordingEmailTransport(EmailTransport):
    def __init__(self):
        self.sent = []
        self.user_messages = []

    def send(self, to_email, message):
        self.sent.append((to_email, message))
        return "email-id"

    def send_to_user(self, user_id, message):
        self.user_messages.append((user_id, message))


@pytest.fixture
def engine():
    engine = create_db_engine("sqlite://")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def catalog(engine):
    return SqlProductCatalog(engine)


@pytest.fixture
def product(catalog):
    return catalog.add_product("Noise-cancelling headphones", 90000)


@pytest.fixture
def store(engine, catalog):
    return AlertStore(engine, catalog)


@pytest.fixture
def anonymous_store(engine, catalog):
    return AnonymousAlertStore(engine, catalog)


@pytest.fixture
def registry():
    return ConnectionRegistry()


@pytest.fixture
def email_transport():
    return RecordingEmailTransport()


@pytest.fixture
def user_id():
    return uuid.uuid4()


@pytest.fixture
def container(engine, email_transport):
    container = Container()
    container.settings.override(
        providers.Object(
            Settings(
                _env_file=None,
                database_url="sqlite://",
                jwt_secret=JWT_SECRET,
                frontend_url="http://frontend.test",
                catalog_url=None,
                resend_api_key="",
            )
        )
    )
    container.engine.override(providers.Object(engine))
    container.email_transport.override(providers.Object(email_transport))
    return container


@pytest.fixture
def client(container):
    with TestClient(create_app(container)) as test_client:
        yield test_client


@pytest.fixture
def auth_headers():
    def make(user_id, role="user"):
        token = create_access_token(user_id, JWT_SECRET, role=role)
        return {"Authorization": f"Bearer {token}"}

    return make


@pytest.fixture
def make_socket():
    return FakeWebSocket


@pytest.fixture
def noon_clock():
    return lambda: NOON


@pytest.fixture
def slow_catalog(catalog):
    return SlowCatalog(catalog)


@pytest.fixture
def run_with_ticker():
    """Run a coroutine; returns (result, longest event-loop stall in seconds)."""

    def run(coro):
        return asyncio.run(_longest_stall(coro))

    return run
