"""
Response synthesis engine.

Wraps the generation oracle with:

- prompt composition (persona, feature mode, accessibility modifier,
  rendered context window, emergency instruction)
- a bounded, strictly sequential retry of rate-limited calls driven by
  cooperative sleeps; any other oracle error goes straight to the fallback
- an overall per-turn timeout that covers every attempt
- fixed per-language fallback texts (generic and safety)
- script normalization for users who chose Roman letters

`ResponseSynthesisEngine.synthesize` never raises: every failure mode
degrades to a `GenerationResult` with origin FALLBACK.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional, Protocol

from configs.settings import settings
from core.synthesis.models import (
    GenerationRequest,
    GenerationResult,
    Origin,
    ScriptPreference,
)
from core.synthesis.prompts import (
    ACCESSIBILITY_INSTRUCTIONS,
    EMERGENCY_INSTRUCTION,
    EMERGENCY_TERMS,
    FALLBACK_MESSAGES,
    LANGUAGE_NAMES,
    MODE_INSTRUCTIONS,
    PERSONA_ENGLISH,
    PERSONA_NATIVE,
    PERSONA_TRANSLITERATED,
    RESPONSE_REQUIREMENTS,
    SAFETY_FALLBACK_MESSAGES,
    TRANSLITERATION_RULE,
)
from core.synthesis.script_normalizer import normalize_script
from exceptions.exceptions import OracleError, SafetyBlockedError, TransientUpstreamError


logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]

BACKOFF_FIXED = "fixed"
BACKOFF_EXPONENTIAL = "exponential"


# ---------------------------------------------------------------------------
# Oracle interface
# ---------------------------------------------------------------------------


class GenerationOracle(Protocol):
    """
    Text-generation backend used by the engine.

    `complete` returns the generated text or raises:

    - TransientUpstreamError  when rate limited (retried)
    - SafetyBlockedError      when the provider refused the content
    - OracleError             for anything else
    """

    async def complete(self, prompt: str) -> str:
        ...


# ---------------------------------------------------------------------------
# Prompt composition and fallbacks
# ---------------------------------------------------------------------------


def _is_transliterated(request: GenerationRequest) -> bool:
    return (
        request.script_preference is ScriptPreference.TRANSLITERATION
        and request.language != "en"
    )


def build_prompt(request: GenerationRequest, emergency_number: str = "108") -> str:
    """Compose the single prompt string sent to the oracle for `request`."""
    language_name = LANGUAGE_NAMES.get(request.language, "English")
    transliterated = _is_transliterated(request)

    if request.language == "en" or request.language not in LANGUAGE_NAMES:
        persona = PERSONA_ENGLISH
    elif transliterated:
        persona = PERSONA_TRANSLITERATED.format(language_name=language_name)
    else:
        persona = PERSONA_NATIVE.format(language_name=language_name)

    prompt_lines: List[str] = [persona.strip()]
    if transliterated:
        prompt_lines.append(TRANSLITERATION_RULE.strip())

    prompt_lines.append(MODE_INSTRUCTIONS[request.mode].strip())

    modifier = ACCESSIBILITY_INSTRUCTIONS.get(request.accessibility_modifier, "")
    if modifier:
        prompt_lines.append(modifier)

    if request.emergency_flag:
        # Native-script terms would contradict the Roman-letters rule.
        terms_language = "en" if transliterated else request.language
        terms = EMERGENCY_TERMS.get(terms_language, EMERGENCY_TERMS["en"])
        prompt_lines.append(
            EMERGENCY_INSTRUCTION.format(
                emergency_number=emergency_number, terms=terms
            ).strip()
        )

    prompt_lines.append(
        RESPONSE_REQUIREMENTS.format(language_name=language_name).strip()
    )

    if request.instructions:
        prompt_lines.append(request.instructions.strip())

    history_lines = [
        f"{entry.role}: {entry.content}" for entry in request.context_window
    ]
    prompt_lines.append("Recent conversation (oldest to newest):")
    prompt_lines.append("\n".join(history_lines) if history_lines else "None")

    if request.user_message:
        prompt_lines.append("Current user message:")
        prompt_lines.append(request.user_message)

    return "\n\n".join(prompt_lines)


def fallback_text(
    language: str,
    script_preference: ScriptPreference = ScriptPreference.NATIVE,
    *,
    safety: bool = False,
) -> str:
    """Return the fixed fallback message for `language` (English if unknown)."""
    table = SAFETY_FALLBACK_MESSAGES if safety else FALLBACK_MESSAGES
    if script_preference is ScriptPreference.TRANSLITERATION:
        transliterated = table.get(f"{language}_trans")
        if transliterated:
            return transliterated
    return table.get(language, table["en"])


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------


class ResponseSynthesisEngine:
    """
    Stateless, reentrant wrapper around a GenerationOracle.

    Parameters
    ----------
    oracle:
        The generation backend.
    max_retries:
        Upper bound on oracle calls per request (>= 1).
    retry_delay:
        Seconds to wait between attempts.
    backoff:
        "fixed" (same delay every time) or "exponential" (delay doubles per
        attempt). Both respect `max_retries`.
    timeout:
        Overall budget in seconds for all attempts of one request, including
        the delays between them.
    sleep:
        Awaitable used for the delay; injectable for tests.
    """

    def __init__(
        self,
        oracle: GenerationOracle,
        *,
        max_retries: Optional[int] = None,
        retry_delay: Optional[float] = None,
        backoff: Optional[str] = None,
        timeout: Optional[float] = None,
        emergency_number: Optional[str] = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.oracle = oracle
        self.max_retries = max_retries if max_retries is not None else settings.max_retries
        self.retry_delay = retry_delay if retry_delay is not None else settings.retry_delay_seconds
        self.backoff = backoff or settings.retry_backoff
        self.timeout = timeout if timeout is not None else settings.turn_timeout_seconds
        self.emergency_number = emergency_number or settings.emergency_number
        self._sleep = sleep

        if self.max_retries < 1:
            raise ValueError("max_retries must be at least 1")
        if self.backoff not in (BACKOFF_FIXED, BACKOFF_EXPONENTIAL):
            raise ValueError(f"Unknown retry backoff: {self.backoff!r}")

    def delay_for(self, attempt: int) -> float:
        """Delay to wait after failed attempt number `attempt` (1-based)."""
        if self.backoff == BACKOFF_EXPONENTIAL:
            return self.retry_delay * (2 ** (attempt - 1))
        return self.retry_delay

    async def synthesize(self, request: GenerationRequest) -> GenerationResult:
        prompt = build_prompt(request, self.emergency_number)
        attempts: List[int] = [0]

        try:
            text = await asyncio.wait_for(
                self._complete_with_retry(prompt, attempts), timeout=self.timeout
            )
        except SafetyBlockedError as exc:
            logger.warning(
                "Oracle blocked content (category=%s); sending safety fallback.",
                exc.category,
            )
            return self._fallback(request, attempts[0], exc, safety=True)
        except asyncio.TimeoutError as exc:
            logger.warning(
                "Oracle timed out after %.1fs (%d attempt(s)); sending fallback.",
                self.timeout,
                attempts[0],
            )
            return self._fallback(request, attempts[0], exc)
        except OracleError as exc:
            logger.warning(
                "Oracle failed after %d attempt(s): %s; sending fallback.",
                attempts[0],
                exc,
            )
            return self._fallback(request, attempts[0], exc)
        except Exception as exc:
            logger.warning(
                "Unexpected oracle error; sending fallback.", exc_info=True
            )
            return self._fallback(request, attempts[0], exc)

        if _is_transliterated(request):
            text = normalize_script(text, request.language)
            if not text:
                logger.warning(
                    "Reply was entirely in native script after normalization; "
                    "sending fallback."
                )
                return self._fallback(
                    request, attempts[0], OracleError("empty after normalization")
                )

        return GenerationResult(text=text, origin=Origin.FRESH, attempts=attempts[0])

    async def _complete_with_retry(self, prompt: str, attempts: List[int]) -> str:
        """
        Call the oracle up to `max_retries` times, strictly one after another.

        Only TransientUpstreamError is retried. Any other OracleError, an empty
        completion included, is raised after the first attempt.

        `attempts[0]` is updated before each call so the caller still knows
        the count when this coroutine is cancelled by the timeout.
        """
        last_error: Optional[TransientUpstreamError] = None

        for attempt in range(1, self.max_retries + 1):
            attempts[0] = attempt
            try:
                text = await self.oracle.complete(prompt)
            except TransientUpstreamError as exc:
                last_error = exc
                logger.warning(
                    "Oracle attempt %d/%d rate limited: %s",
                    attempt,
                    self.max_retries,
                    exc,
                )
            else:
                if not text or not text.strip():
                    raise OracleError("Oracle returned an empty completion.")
                return text.strip()

            if attempt < self.max_retries:
                await self._sleep(self.delay_for(attempt))

        assert last_error is not None
        raise last_error

    def _fallback(
        self,
        request: GenerationRequest,
        attempts: int,
        error: BaseException,
        *,
        safety: bool = False,
    ) -> GenerationResult:
        return GenerationResult(
            text=fallback_text(request.language, request.script_preference, safety=safety),
            origin=Origin.FALLBACK,
            attempts=attempts,
            failure=type(error).__name__,
        )
