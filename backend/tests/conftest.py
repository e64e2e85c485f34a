import json
from datetime import datetime, timedelta, timezone

import httpx
import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from health_reporter.auth import TokenService
from health_reporter.config import Settings
from health_reporter.database import Database
from health_reporter.main import create_app
from health_reporter.services.account_service import AccountService
from health_reporter.services.registry_client import RegistryClient
from health_reporter.services.report_store import ReportStore

SECRET = "test-secret-do-not-use-in-prod"
DEMO_EMAIL = "clinician@example.com"
DEMO_PASSWORD = "correct-horse-battery"


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime = None):
        self.now = start or datetime(2026, 1, 13, 9, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now = self.now + delta


class FakeRegistry:
    """Records submissions and answers like the national registry would."""

    def __init__(self):
        self.calls = []
        self.status_code = 200
        self.reply = None
        self.raw_reply = None
        self.error = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(json.loads(request.content))
        if self.error is not None:
            raise self.error(f"simulated {self.error.__name__}", request=request)
        if self.raw_reply is not None:
            return httpx.Response(self.status_code, text=self.raw_reply)
        if self.status_code != 200:
            return httpx.Response(self.status_code, json={"error": "registry unavailable"})
        body = self.reply if self.reply is not None else {"nationalId": f"NAT-{len(self.calls):06d}"}
        return httpx.Response(200, json=body)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def tokens(clock):
    return TokenService(SECRET, clock=clock)


@pytest.fixture
def fake_registry():
    return FakeRegistry()


@pytest.fixture
def registry_client(fake_registry):
    return RegistryClient("http://registry.test", timeout=2.0, transport=fake_registry.transport())


@pytest_asyncio.fixture
async def database(tmp_path):
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'reports.db'}")
    await db.connect()
    try:
        yield db
    finally:
        await db.dispose()


@pytest_asyncio.fixture
async def accounts(database, tokens):
    return AccountService(database, tokens, bcrypt_rounds=4)


@pytest_asyncio.fixture
async def alice(accounts):
    return await accounts.create_account("alice@example.com", "alice-password")


@pytest_asyncio.fixture
async def bob(accounts):
    return await accounts.create_account("bob@example.com", "bob-password")


@pytest_asyncio.fixture
async def store(database):
    return ReportStore(database)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'api.db'}",
        jwt_secret=SECRET,
        bcrypt_rounds=4,
        registry_url="http://registry.test",
        demo_user_email=DEMO_EMAIL,
        demo_user_password=DEMO_PASSWORD,
    )


@pytest.fixture
def client(settings, fake_registry):
    app = create_app(settings, registry_transport=fake_registry.transport())
    with TestClient(app) as c:
        yield c


@pytest.fixture
def login_as(client):
    """Fetch a Bearer credential and return it as request headers."""

    def _login(email: str = DEMO_EMAIL, password: str = DEMO_PASSWORD) -> dict:
        r = client.post("/api/auth/token", json={"email": email, "password": password})
        assert r.status_code == 200, r.text
        assert "set-cookie" not in r.headers
        return {"Authorization": f"Bearer {r.json()['access_token']}"}

    return _login


@pytest.fixture
def second_account(client):
    """A second clinician, created through the running app's account service."""
    email, password = "other@example.com", "other-password"
    client.portal.call(client.app.state.accounts.create_account, email, password)
    return email, password
