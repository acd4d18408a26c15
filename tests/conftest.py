import sys
from pathlib import Path

import pytest

SERVER_DIR = Path(__file__).resolve().parent.parent / "server"
sys.path.insert(0, str(SERVER_DIR))

from notify_client import NotifyClient  # noqa: E402
from notify_stub import create_app, start_stub_server  # noqa: E402

SERVICE_ID = "95b3b534-bdd6-4f26-ad91-84b4e2301cca"
SECRET = "e8a5f59a-b445-4dc0-9513-c5831615f937"
API_KEY = f"key_name-{SERVICE_ID}-{SECRET}"


@pytest.fixture
def stub_server():
    server = start_stub_server(create_app(API_KEY))
    yield server
    server.stop()


@pytest.fixture
def client(stub_server):
    return NotifyClient(API_KEY, base_url=stub_server.url, timeout=10)


@pytest.fixture
def last_request(stub_server):
    def get():
        received = stub_server.state.received
        assert received, "stub server received no requests"
        return received[-1]
    return get
