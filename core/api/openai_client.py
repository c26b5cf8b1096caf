"""
core.api.openai_client

Generation oracle backed by the OpenAI Chat Completions API.

Used by:
  - core/synthesis/response_engine.py (through the GenerationOracle protocol)
  - runtime/api/server.py and cli/main.py, which construct it

Provider errors are translated into the project's taxonomy so the synthesis
engine never has to know about the OpenAI SDK:

  RateLimitError                         -> TransientUpstreamError
  content filter (finish_reason / 400)   -> SafetyBlockedError
  any other OpenAIError, empty response  -> OracleError
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from openai import AsyncOpenAI, BadRequestError, OpenAIError, RateLimitError

from configs.settings import settings
from exceptions.exceptions import (
    OracleError,
    SafetyBlockedError,
    TransientUpstreamError,
)


logger = logging.getLogger(__name__)

_SAFETY_CODES = ("content_filter", "content_policy_violation")


def _retry_after(error: RateLimitError) -> Optional[float]:
    response = getattr(error, "response", None)
    if response is None:
        return None
    raw = response.headers.get("retry-after")
    try:
        return float(raw) if raw is not None else None
    except ValueError:
        return None


def _is_safety_rejection(error: BadRequestError) -> bool:
    code = getattr(error, "code", None)
    if code in _SAFETY_CODES:
        return True
    body: Any = getattr(error, "body", None)
    if isinstance(body, dict):
        return body.get("code") in _SAFETY_CODES
    return False


class OpenAIGenerationOracle:
    """
    Thin async wrapper around `chat.completions.create`.

    The SDK client is created on first use, so constructing the oracle does
    not require network access and reads the API key lazily.
    """

    def __init__(
        self,
        *,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        client: Optional[AsyncOpenAI] = None,
    ) -> None:
        self.model = model or settings.openai_model
        self.temperature = temperature if temperature is not None else settings.temperature
        self.max_tokens = max_tokens or settings.max_output_tokens
        self._client = client

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=settings.openai_api_key,
                base_url=settings.openai_base_url,
            )
        return self._client

    async def complete(self, prompt: str) -> str:
        """
        Send `prompt` as a single user message and return the reply text.

        Raises
        ------
        TransientUpstreamError
            If the API rate limited the call.
        SafetyBlockedError
            If the content was filtered by the provider.
        OracleError
            For every other failure, including an empty response.
        """
        try:
            completion = await self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except RateLimitError as e:
            raise TransientUpstreamError(str(e), retry_after=_retry_after(e)) from e
        except BadRequestError as e:
            if _is_safety_rejection(e):
                raise SafetyBlockedError(str(e), category=getattr(e, "code", None)) from e
            raise OracleError(str(e), status_code=e.status_code) from e
        except OpenAIError as e:
            raise OracleError(str(e), status_code=getattr(e, "status_code", None)) from e

        if not completion.choices:
            raise OracleError("Empty response from OpenAI API.")

        choice = completion.choices[0]
        if choice.finish_reason == "content_filter":
            raise SafetyBlockedError(category="content_filter")

        text = choice.message.content or ""
        if not text.strip():
            raise OracleError("OpenAI API returned an empty message.")

        logger.debug("Completion received (%d chars, model=%s)", len(text), self.model)
        return text


class EchoOracle:
    """
    Offline oracle used by the CLI when no API key is configured.

    Replies with the last user line of the prompt so the dialogue flow can be
    exercised end to end without network access.
    """

    def __init__(self, prefix: str = "(offline) You said: ") -> None:
        self.prefix = prefix

    async def complete(self, prompt: str) -> str:
        marker = "Current user message:\n\n"
        if marker in prompt:
            message = prompt.rsplit(marker, 1)[1].strip()
        else:
            message = prompt.strip().splitlines()[-1] if prompt.strip() else ""
        return f"{self.prefix}{message}"
