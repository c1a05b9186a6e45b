import os
import sys
from pathlib import Path

import httpx
import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from aad_group_action import action as action_module  # noqa: E402
from aad_group_action.config import ActionSettings  # noqa: E402
from aad_group_action.utils import security  # noqa: E402

GROUP_ID = "12345678-1234-1234-1234-123456789012"
USER = "test-user@example.com"


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "asyncio: mark test to run in an asyncio event loop"
    )
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "auth: mark test as testing authentication")


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """Keep process settings and logging setup out of the tests.

    Runs every test from an empty directory so no .env file is picked up,
    drops any AAD_ACTION_* variables, and marks logging as configured so
    the module-level entry points leave pytest's handlers alone.
    """
    monkeypatch.chdir(tmp_path)
    for name in list(os.environ):
        if name.upper().startswith("AAD_ACTION_"):
            monkeypatch.delenv(name)
    monkeypatch.setattr(security, "_LOGGING_CONFIGURED", True)
    monkeypatch.setattr(action_module, "_default_action", None)
    yield


class RequestRecorder:
    """httpx mock transport that replays queued responses and records requests.

    Queue entries may be ``httpx.Response`` objects, exceptions to raise, or
    callables taking the request and returning a response.
    """

    def __init__(self):
        self.requests = []
        self.responses = []
        self.transport = httpx.MockTransport(self.handle)

    def queue(self, *responses):
        self.responses.extend(responses)
        return self

    @property
    def call_count(self):
        return len(self.requests)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self.responses:
            raise AssertionError(f"Unexpected request: {request.method} {request.url}")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        if callable(response):
            return response(request)
        return response


@pytest.fixture
def recorder():
    return RequestRecorder()


@pytest.fixture
def settings():
    return ActionSettings(recovery_delay_seconds=5.0)


@pytest.fixture
def bearer_context():
    return {
        "environment": {"ADDRESS": "https://graph.microsoft.com"},
        "secrets": {"BEARER_AUTH_TOKEN": "test-token-123456"},
    }


@pytest.fixture
def action(settings, recorder):
    return action_module.AddUserToGroupAction(
        settings=settings, transport=recorder.transport
    )
