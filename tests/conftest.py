"""Pytest configuration for git_editor tests."""
import sys
from pathlib import Path

# Add src/back to path for src-layout imports
_PROJECT_ROOT = Path(__file__).parent.parent
_SRC_BACK = _PROJECT_ROOT / 'src' / 'back'
if str(_SRC_BACK) not in sys.path:
    sys.path.insert(0, str(_SRC_BACK))

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from git_editor.api.testing import FAKE_API_URL, FakeGitHub, fake_app

TOKEN = 'ghp_test_alice_token_0123456789'
OTHER_TOKEN = 'ghp_test_bob_token_9876543210'


@pytest.fixture
def fake():
    """Fake upstream with one user and a public and a private repository."""
    fake = FakeGitHub()
    fake.add_user(TOKEN, 'alice', name='Alice Example')
    fake.add_user(OTHER_TOKEN, 'bob')
    fake.add_repo(
        'alice', 'notes',
        files={
            'README.md': '# notes\n',
            'src/app.py': "print('hello')\n",
            'src/util/helpers.py': 'def helper():\n    return 1\n',
        },
    )
    fake.add_repo('alice', 'secret-plans', private=True)
    return fake


@pytest.fixture
def app(fake):
    """App wired to the fake upstream."""
    return fake_app(fake)


@pytest_asyncio.fixture
async def client(app):
    """HTTP client talking to the app in-process."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as c:
        yield c


@pytest_asyncio.fixture
async def session_id(client):
    """Session id of a logged-in user (alice)."""
    r = await client.post('/api/auth/login', json={'token': TOKEN})
    assert r.status_code == 200
    return r.json()['sessionId']


@pytest_asyncio.fixture
async def upstream(fake):
    """httpx client routed to the fake upstream, for direct client tests."""
    async with fake.http_client() as http:
        yield http


@pytest.fixture
def api_url():
    return FAKE_API_URL


@pytest.fixture
def token():
    """Access token of the seeded user (alice)."""
    return TOKEN
