from types import SimpleNamespace

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from email_analyzer import create_app
from email_analyzer.assistants.runner import AssistantRunner
from email_analyzer.config import Settings, get_settings
from email_analyzer.dependencies import get_runner


class FakeAssistantClient:
    """In-memory stand-in for AsyncOpenAI's beta threads API."""

    def __init__(self, statuses=("completed",), reply="Hello from the assistant", failures=None):
        self.statuses = list(statuses)
        self.reply = reply
        self.failures = failures or {}
        self.calls = []
        self.content_block = None

        messages = SimpleNamespace(create=self._create_message, list=self._list_messages)
        runs = SimpleNamespace(create=self._create_run, retrieve=self._retrieve_run)
        threads = SimpleNamespace(create=self._create_thread, messages=messages, runs=runs)
        self.beta = SimpleNamespace(threads=threads)

    def _record(self, step, **kwargs):
        self.calls.append((step, kwargs))
        if step in self.failures:
            raise self.failures[step]

    async def _create_thread(self):
        self._record("threads.create")
        return SimpleNamespace(id="thread_abc")

    async def _create_message(self, thread_id, role, content):
        self._record("messages.create", thread_id=thread_id, role=role, content=content)
        return SimpleNamespace(id="msg_user", role=role)

    async def _create_run(self, thread_id, assistant_id):
        self._record("runs.create", thread_id=thread_id, assistant_id=assistant_id)
        return SimpleNamespace(id="run_abc", status="queued")

    async def _retrieve_run(self, run_id, thread_id):
        self._record("runs.retrieve", run_id=run_id, thread_id=thread_id)
        status = self.statuses.pop(0) if len(self.statuses) > 1 else self.statuses[0]
        return SimpleNamespace(id=run_id, status=status)

    async def _list_messages(self, thread_id, order, limit):
        self._record("messages.list", thread_id=thread_id, order=order, limit=limit)
        block = self.content_block or SimpleNamespace(type="text", text=SimpleNamespace(value=self.reply))
        return SimpleNamespace(data=[SimpleNamespace(role="assistant", content=[block])])

    def steps(self):
        return [step for step, _ in self.calls]


class RecordingSleep:
    def __init__(self):
        self.waits = []

    async def __call__(self, seconds):
        self.waits.append(seconds)


def make_settings(**overrides) -> Settings:
    values = {
        "openai_api_key": "sk-test",
        "assistant_id": "asst_test",
        "poll_interval": 1.0,
        "max_wait": 15.0,
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def fake_client():
    return FakeAssistantClient()


@pytest.fixture
def sleep():
    return RecordingSleep()


@pytest.fixture
def settings(tmp_path):
    return make_settings(log_dir=str(tmp_path))


@pytest.fixture
def app(settings, fake_client, sleep):
    """App wired to the fake assistant client; swap `app.state.settings` to reconfigure."""
    app = create_app()
    app.state.settings = settings

    def _settings():
        return app.state.settings

    def _runner():
        return AssistantRunner(app.state.settings, client=fake_client, sleep=sleep)

    app.dependency_overrides[get_settings] = _settings
    app.dependency_overrides[get_runner] = _runner
    return app


@pytest_asyncio.fixture
async def api(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
