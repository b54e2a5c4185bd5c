import asyncio
import logging
import math
from typing import Callable, Optional

from openai import AsyncOpenAI, AuthenticationError

from email_analyzer.assistants.prompts import build_message
from email_analyzer.config import TRANSIENT_RUN_STATUSES, Settings
from email_analyzer.errors import (
    ConfigurationError,
    IncompleteJobError,
    JobTimeoutError,
    RemoteCallError,
)
from email_analyzer.utils.log_helpers import create_log

logger = logging.getLogger(__name__)

CREDENTIAL_MARKERS = ("invalid_api_key", "API key")


def classify_remote_error(step: str, error: Exception) -> Exception:
    """Map an SDK failure to ConfigurationError or RemoteCallError."""
    message = str(error)
    if isinstance(error, AuthenticationError) or any(m in message for m in CREDENTIAL_MARKERS):
        return ConfigurationError(
            f"Invalid API key configuration. Please check your environment settings. ({step})"
        )
    return RemoteCallError(f"Error {step}: {message}")


class AssistantRunner:
    """Runs one email through an OpenAI assistant: thread, message, run, wait, read."""

    def __init__(self, settings: Settings, client: Optional[AsyncOpenAI] = None, sleep=asyncio.sleep,
                 client_factory: Optional[Callable[[Settings], AsyncOpenAI]] = None):
        self.settings = settings
        self._client = client
        self._client_factory = client_factory
        self._sleep = sleep

    @property
    def client(self) -> AsyncOpenAI:
        # Resolved on first use so a missing key never reaches the SDK
        if self._client is None:
            if self._client_factory is not None:
                self._client = self._client_factory(self.settings)
            else:
                self._client = AsyncOpenAI(api_key=self.settings.openai_api_key)
        return self._client

    def check_configuration(self) -> None:
        if not self.settings.openai_api_key:
            raise ConfigurationError("OpenAI API key not configured")
        if not self.settings.assistant_id:
            raise ConfigurationError("Assistant ID not configured")

    async def create_thread(self):
        try:
            thread = await self.client.beta.threads.create()
        except Exception as e:
            logger.error(f"Error creating thread: {e}")
            raise classify_remote_error("creating thread", e) from e

        logger.info(f"Thread created: {thread.id}")
        if self.settings.file_logging:
            await create_log(
                "assistant.log",
                {"event": "Thread created", "threadId": thread.id},
                self.settings.log_dir,
            )
        return thread

    async def add_message(self, thread_id: str, content: str):
        try:
            return await self.client.beta.threads.messages.create(
                thread_id=thread_id,
                role="user",
                content=content,
            )
        except Exception as e:
            logger.error(f"Error adding message to thread {thread_id}: {e}")
            raise classify_remote_error("adding message", e) from e

    async def start_run(self, thread_id: str):
        try:
            run = await self.client.beta.threads.runs.create(
                thread_id=thread_id,
                assistant_id=self.settings.assistant_id,
            )
        except Exception as e:
            logger.error(f"Error running thread {thread_id}: {e}")
            raise classify_remote_error("running thread", e) from e

        logger.info(f"Run {run.id} started on thread {thread_id}")
        return run

    async def retrieve_run(self, thread_id: str, run_id: str):
        try:
            return await self.client.beta.threads.runs.retrieve(run_id=run_id, thread_id=thread_id)
        except Exception as e:
            logger.error(f"Error retrieving run {run_id}: {e}")
            raise classify_remote_error("retrieving run", e) from e

    def max_checks(self) -> int:
        interval = self.settings.poll_interval
        if interval <= 0:
            return 1
        return max(1, math.ceil(self.settings.max_wait / interval))

    async def wait_for_run(self, thread_id: str, run_id: str):
        """Poll the run until it leaves the transient states or the budget runs out.

        Returns the completed run. Raises IncompleteJobError for any other
        terminal status, and JobTimeoutError if it is still queued or in
        progress after the last check.
        """
        checks = self.max_checks()
        status = "unknown"

        for attempt in range(1, checks + 1):
            await self._sleep(self.settings.poll_interval)
            run = await self.retrieve_run(thread_id, run_id)
            status = run.status
            logger.debug(f"Run {run_id} status after check {attempt}/{checks}: {status}")

            if status == "completed":
                return run
            if status not in TRANSIENT_RUN_STATUSES:
                raise IncompleteJobError(status)

        raise JobTimeoutError(status)

    async def latest_response(self, thread_id: str) -> str:
        try:
            messages = await self.client.beta.threads.messages.list(
                thread_id=thread_id,
                order="desc",
                limit=1,
            )
        except Exception as e:
            logger.error(f"Error listing messages for thread {thread_id}: {e}")
            raise classify_remote_error("listing messages", e) from e

        if not messages.data or not messages.data[0].content:
            raise RemoteCallError(f"Thread {thread_id} has no response message")

        block = messages.data[0].content[0]
        text = getattr(block, "text", None)
        if text is None:
            raise RemoteCallError(f"Latest message in thread {thread_id} is not text ({block.type})")
        return text.value

    async def handle_analysis(self, email_body: str) -> str:
        """Send `email_body` to the assistant and return the text of its reply."""
        self.check_configuration()

        thread = await self.create_thread()
        await self.add_message(thread.id, build_message(email_body, self.settings.response_mode))
        run = await self.start_run(thread.id)
        await self.wait_for_run(thread.id, run.id)
        return await self.latest_response(thread.id)
