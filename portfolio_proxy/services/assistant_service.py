"""Assistant conversation orchestrator.

Produces one assistant reply for one user message by driving the Assistants
v2 REST choreography: create thread, attach message, create run, poll the
run until it settles, then read the first assistant message.
"""
import asyncio
import logging
import re
import time
from typing import Any, Awaitable, Callable, Dict, Optional

from portfolio_proxy.errors import (
    ConfigurationError,
    InvalidUpstreamData,
    NoAssistantResponse,
    PollingTimeout,
    UpstreamError,
    UpstreamRunFailed,
)
from portfolio_proxy.models import MessageList, Run, RunStatus, Thread
from portfolio_proxy.services.config_service import ChatbotSettings, PollingSettings, RetrySettings
from portfolio_proxy.services.http_client_service import HttpClientService
from portfolio_proxy.utils.colored_logger import get_provider_logger
from portfolio_proxy.utils.retry import linear_delay, retry_with_backoff

logger = logging.getLogger(__name__)
provider_logger = get_provider_logger(__name__, 'chatbot')

# File-search citation markers such as 【4:0†source】
CITATION_PATTERN = re.compile(r"【[^】]*】")

# Client errors that may succeed when repeated
RETRYABLE_CLIENT_STATUSES = {408, 409, 429}


def is_retryable(error: BaseException) -> bool:
    """Decide whether a failed assistant API call is worth repeating."""
    if not isinstance(error, UpstreamError):
        return False
    status = error.upstream_status
    if status is None or status >= 500:
        return True
    return status in RETRYABLE_CLIENT_STATUSES


def next_poll_interval(elapsed: float, polling: PollingSettings) -> float:
    """Interval before the next status check.

    Starts at ``initial_interval`` and is multiplied by ``backoff_factor``
    for every full ``backoff_step`` seconds of elapsed polling, capped at
    ``max_interval``.
    """
    steps = int(elapsed // polling.backoff_step)
    interval = polling.initial_interval * (polling.backoff_factor ** steps)
    return min(interval, polling.max_interval)


def extract_reply(messages: MessageList) -> str:
    """Return the first assistant message's first text value.

    Raises:
        NoAssistantResponse: If no assistant message carries text
    """
    for message in messages.data:
        if message.role != "assistant":
            continue
        if message.content and message.content[0].text and message.content[0].text.value:
            return CITATION_PATTERN.sub("", message.content[0].text.value)
        break
    raise NoAssistantResponse()


class AssistantService:
    """Stateless orchestrator over the Assistants v2 REST API."""

    def __init__(
        self,
        http_client: HttpClientService,
        settings: ChatbotSettings,
        retry: RetrySettings,
        polling: PollingSettings,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize assistant service.

        Args:
            http_client: Shared HTTP client adapter
            settings: Chatbot provider settings (API key, assistant id, base URL)
            retry: Per-call retry tuning
            polling: Run polling tuning
            sleep: Awaitable sleep, injectable for tests
            clock: Monotonic clock in seconds, injectable for tests
        """
        self.http_client = http_client
        self.settings = settings
        self.retry = retry
        self.polling = polling
        self._sleep = sleep
        self._clock = clock

    def _headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.settings.api_key}",
            "OpenAI-Beta": "assistants=v2",
        }

    async def _call(self, description: str, operation: Callable[[], Awaitable[Any]]) -> Any:
        return await retry_with_backoff(
            operation,
            max_attempts=self.retry.max_attempts,
            delay=linear_delay(self.retry.base_delay),
            retry_on=(UpstreamError,),
            should_retry=is_retryable,
            description=description,
            sleep=self._sleep,
        )

    @staticmethod
    def _parse(model, payload: Any, what: str):
        try:
            return model.model_validate(payload)
        except ValueError as e:
            logger.error(f"Unexpected {what} payload: {str(payload)[:200]}")
            raise InvalidUpstreamData(f"Invalid {what} data received from assistant API") from e

    async def create_thread(self) -> Thread:
        payload = await self._call(
            "Create thread",
            lambda: self.http_client.post_json(
                f"{self.settings.base_url}/threads",
                json={"metadata": {}},
                headers=self._headers(),
                error_message="Failed to create thread",
            ),
        )
        return self._parse(Thread, payload, "thread")

    async def add_message(self, thread_id: str, message: str) -> None:
        await self._call(
            "Add message",
            lambda: self.http_client.post_json(
                f"{self.settings.base_url}/threads/{thread_id}/messages",
                json={"role": "user", "content": message},
                headers=self._headers(),
                error_message="Failed to add message",
            ),
        )

    async def create_run(self, thread_id: str) -> Run:
        body: Dict[str, Any] = {"assistant_id": self.settings.assistant_id}
        if self.settings.instructions:
            body["instructions"] = self.settings.instructions
        if self.settings.model:
            body["model"] = self.settings.model

        payload = await self._call(
            "Create run",
            lambda: self.http_client.post_json(
                f"{self.settings.base_url}/threads/{thread_id}/runs",
                json=body,
                headers=self._headers(),
                error_message="Failed to create run",
            ),
        )
        return self._parse(Run, payload, "run")

    async def get_run(self, thread_id: str, run_id: str) -> Run:
        payload = await self._call(
            "Get run status",
            lambda: self.http_client.get_json(
                f"{self.settings.base_url}/threads/{thread_id}/runs/{run_id}",
                headers=self._headers(),
                error_message="Failed to get run status",
            ),
        )
        return self._parse(Run, payload, "run")

    async def list_messages(self, thread_id: str) -> MessageList:
        payload = await self._call(
            "Get messages",
            lambda: self.http_client.get_json(
                f"{self.settings.base_url}/threads/{thread_id}/messages",
                headers=self._headers(),
                error_message="Failed to get messages",
            ),
        )
        return self._parse(MessageList, payload, "message list")

    async def wait_for_run(self, thread_id: str, run_id: str) -> Run:
        """Poll a run until it leaves the pending states.

        Args:
            thread_id: Thread the run belongs to
            run_id: Run to poll

        Returns:
            The completed run

        Raises:
            PollingTimeout: If the run is still pending after ``max_wait`` seconds
            UpstreamRunFailed: If the run ends failed, cancelled or expired
        """
        started = self._clock()
        polls = 0

        while True:
            elapsed = self._clock() - started
            remaining = self.polling.max_wait - elapsed
            if remaining <= 0:
                logger.error(
                    f"Run {run_id} still pending after {elapsed:.1f}s ({polls} status checks)"
                )
                raise PollingTimeout()

            await self._sleep(min(next_poll_interval(elapsed, self.polling), remaining))

            run = await self.get_run(thread_id, run_id)
            polls += 1
            logger.debug(f"Run {run_id} status after poll {polls}: {run.status.value}")

            if run.status == RunStatus.COMPLETED:
                return run
            if not run.status.is_pending:
                detail = f": {run.last_error.message}" if run.last_error and run.last_error.message else ""
                logger.error(f"Run {run_id} ended with status {run.status.value}{detail}")
                raise UpstreamRunFailed(f"Run failed with status: {run.status.value}{detail}")

    async def get_reply(self, user_message: str) -> str:
        """Send one user message to the assistant and return its text reply.

        Every step uses a fresh thread; nothing is kept between calls.

        Args:
            user_message: Message text from the end user

        Returns:
            Assistant reply with citation markers removed

        Raises:
            UpstreamError: If a call keeps failing after retries
            UpstreamRunFailed: If the run ends in a non-completed terminal status
            PollingTimeout: If the run does not settle in time
            NoAssistantResponse: If the thread holds no assistant text
        """
        thread = await self.create_thread()
        logger.debug(f"Thread created: {thread.id}")

        await self.add_message(thread.id, user_message)
        logger.debug(f"Message attached to thread {thread.id}")

        run = await self.create_run(thread.id)
        logger.debug(f"Run {run.id} started with status {run.status.value}")

        await self.wait_for_run(thread.id, run.id)
        logger.debug(f"Run {run.id} completed")

        reply = extract_reply(await self.list_messages(thread.id))
        provider_logger.info(f"🤖 Assistant reply: {len(reply)} chars")
        return reply

    async def validate_assistant(self) -> Dict[str, Any]:
        """Check that the configured assistant exists and is reachable.

        Returns:
            Assistant object returned by the API

        Raises:
            ConfigurationError: If the assistant cannot be retrieved
        """
        url = f"{self.settings.base_url}/assistants/{self.settings.assistant_id}"
        try:
            assistant = await self.http_client.get_json(
                url, headers=self._headers(), error_message="Failed to validate assistant"
            )
        except (UpstreamError, InvalidUpstreamData) as e:
            logger.error(f"Assistant validation failed for {self.settings.assistant_id}: {e.message}")
            raise ConfigurationError(f"Assistant validation failed: {e.message}") from e

        if not isinstance(assistant, dict):
            raise ConfigurationError("Assistant validation failed: unexpected response")

        logger.info(
            f"Assistant validated: id={assistant.get('id')}, "
            f"name={assistant.get('name')}, model={assistant.get('model')}"
        )
        return assistant
