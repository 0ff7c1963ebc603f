import asyncio
import logging
import time
from typing import Awaitable, Callable, Optional

import httpx
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    stop_before_delay,
    wait_exponential,
)

from quizgen.errors import (
    CompletionUnavailable,
    ConfigurationMissing,
    InvalidCompletionShape,
    TransientCompletionError,
)
from quizgen.services.prompt_builder import Prompt
from quizgen.utils.config import Settings

logger = logging.getLogger(__name__)


def is_retryable_status(status_code: int) -> bool:
    return status_code == 429 or status_code >= 500


class CompletionClient:
    """Chat-completion client for the OpenRouter-compatible endpoint.

    Retries 5xx, 429 and transport failures with exponential backoff
    (backoff_seconds, doubled on every attempt) up to max_attempts, and never
    past overall_timeout: a retry whose backoff would end after the ceiling
    is skipped, and each attempt's timeout is capped at the remaining budget.
    Any other non-2xx status fails on the first attempt.
    """

    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        if not settings.openrouter_api_key:
            raise ConfigurationMissing("OpenRouter API key not configured")
        self.settings = settings
        self._transport = transport
        self._sleep = sleep

    def resolve_model(self, requested: Optional[str]) -> str:
        return self.settings.forced_model or requested or self.settings.default_model

    def _headers(self) -> dict:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.settings.openrouter_api_key}",
            "HTTP-Referer": self.settings.app_referer,
            "X-Title": self.settings.app_title,
        }

    async def _post_once(self, client: httpx.AsyncClient, body: dict, timeout: float) -> str:
        try:
            response = await client.post(
                self.settings.openrouter_api_url, headers=self._headers(), json=body, timeout=timeout
            )
        except httpx.TransportError as e:
            logger.warning(f"Completion request failed: {type(e).__name__}: {str(e)}")
            raise TransientCompletionError(f"Network failure: {str(e)}") from e
        except httpx.HTTPError as e:
            raise CompletionUnavailable(f"Request failed: {str(e)}") from e

        logger.info(f"Completion response status: {response.status_code}")
        if response.status_code >= 400:
            message = f"Completion service error: {response.status_code} {response.text[:500]}"
            logger.error(message)
            if is_retryable_status(response.status_code):
                raise TransientCompletionError(message, response.status_code)
            raise CompletionUnavailable(message, response.status_code)

        try:
            data = response.json()
            content = data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise InvalidCompletionShape(f"Unexpected completion envelope: {str(e)}") from e
        if not isinstance(content, str):
            raise InvalidCompletionShape("Completion content is not text")
        return content

    async def complete(
        self,
        prompt: Prompt,
        model: Optional[str] = None,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
        max_attempts: Optional[int] = None,
    ) -> str:
        """Send one chat completion and return the assistant message text.

        Raises CompletionUnavailable once retries are exhausted or on a
        non-retryable status, InvalidCompletionShape when the envelope is not
        the expected chat-completion shape.
        """
        body = {
            "model": self.resolve_model(model),
            "messages": [
                {"role": "system", "content": prompt.system},
                {"role": "user", "content": prompt.user},
            ],
            "max_tokens": max_tokens or self.settings.max_tokens,
            "temperature": self.settings.temperature if temperature is None else temperature,
            "stream": False,
        }
        retrying = AsyncRetrying(
            stop=(
                stop_after_attempt(max_attempts or self.settings.max_attempts)
                | stop_before_delay(self.settings.overall_timeout)
            ),
            wait=wait_exponential(
                multiplier=self.settings.backoff_seconds, min=self.settings.backoff_seconds
            ),
            retry=retry_if_exception_type(TransientCompletionError),
            sleep=self._sleep,
            before_sleep=self._log_retry,
            reraise=True,
        )

        logger.info(f"Requesting completion with model: {body['model']}")
        deadline = time.monotonic() + self.settings.overall_timeout
        async with httpx.AsyncClient(
            timeout=self.settings.request_timeout, transport=self._transport
        ) as client:
            async for attempt in retrying:
                with attempt:
                    # no attempt may outlive the overall ceiling
                    remaining = max(deadline - time.monotonic(), 0.001)
                    timeout = min(self.settings.request_timeout, remaining)
                    return await self._post_once(client, body, timeout)
        raise CompletionUnavailable("Completion retries exhausted")

    @staticmethod
    def _log_retry(retry_state) -> None:
        logger.warning(
            f"Attempt {retry_state.attempt_number} failed, "
            f"retrying in {retry_state.next_action.sleep:.1f}s"
        )
