"""
Generation executor.

Runs a RequestDescriptor against Gemini with bounded retry and exponential
backoff, then maps the result onto a GenerationOutcome.

Per invocation the executor walks this state machine:

    IDLE -> ATTEMPTING(n) -> SUCCESS
                          -> RETRY_WAIT(n) -> ATTEMPTING(n + 1)
                          -> TERMINAL

RETRY_WAIT is only entered for transient server errors while attempts
remain. Nothing is shared between invocations except the credential, which
is fetched again every time.
"""

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, List, Optional

from ..config import (
    BASE_RETRY_DELAY_MS,
    MAX_ATTEMPTS,
    QUOTA_STATUS_CODES,
    TRANSIENT_STATUS_CODES,
)
from ..core.models import (
    ErrorClass,
    Failure,
    GenerationOutcome,
    RequestDescriptor,
    Success,
)
from ..logging_utils import (
    log_generation_complete,
    log_generation_start,
    log_info,
    log_warning,
)
from .exceptions import MissingInputError, NoImageReturnedError

CredentialProvider = Callable[[], str]
Transport = Callable[[str, RequestDescriptor], str]
Delay = Callable[[int], Awaitable[None]]

QUOTA_MESSAGE = (
    "Quota exceeded. The Gemini 3 Pro image model requires a paid API key "
    "(pay-as-you-go). Please select a paid key."
)
TRANSIENT_MESSAGE = (
    "Google Internal Server Error. The model is currently experiencing high "
    "traffic or instability. Please wait a moment and try again."
)
NO_IMAGE_MESSAGE = (
    "No image was generated. Try rephrasing your instruction or using "
    "different reference images."
)
FALLBACK_MESSAGE = "Failed to generate image."


# =============================================================================
# Error Classification
# =============================================================================

def _status_code(error: BaseException) -> Optional[int]:
    status = getattr(error, "status_code", None)
    if status is None:
        status = getattr(error, "status", None)
    return status if isinstance(status, int) else None


def _error_text(error: BaseException) -> str:
    text = str(error)
    api_status = getattr(error, "api_status", None)
    if api_status:
        text = f"{text} {api_status}"
    return text


def is_quota_error(error: BaseException) -> bool:
    """True for HTTP 429 or an explicit quota / RESOURCE_EXHAUSTED signal."""
    status = _status_code(error)
    if status is not None and status in QUOTA_STATUS_CODES:
        return True
    text = _error_text(error)
    if "RESOURCE_EXHAUSTED" in text or "quota" in text.lower():
        return True
    # Bare numbers in the text only count when no status code came with the error
    return status is None and "429" in text


def is_transient_error(error: BaseException) -> bool:
    """True for HTTP 500/503 or an INTERNAL / service-unavailable condition.

    Quota errors are never transient, whatever else their text mentions.
    """
    if isinstance(error, NoImageReturnedError) or is_quota_error(error):
        return False
    status = _status_code(error)
    if status is not None and status in TRANSIENT_STATUS_CODES:
        return True
    text = _error_text(error)
    if "INTERNAL" in text or "UNAVAILABLE" in text or "service unavailable" in text.lower():
        return True
    return status is None and ("500" in text or "503" in text)


def classify_error(error: BaseException) -> ErrorClass:
    """Map any failure onto the coarse user-facing category."""
    if isinstance(error, MissingInputError):
        return ErrorClass.MISSING_INPUT
    if isinstance(error, NoImageReturnedError):
        return ErrorClass.NO_IMAGE_RETURNED

    # Quota first: a 429 whose text mentions a server error is still quota
    if is_quota_error(error):
        return ErrorClass.QUOTA_EXCEEDED
    if is_transient_error(error):
        return ErrorClass.TRANSIENT_SERVER_ERROR
    return ErrorClass.UNCLASSIFIED


def user_message(error_class: ErrorClass, error: Optional[BaseException] = None) -> str:
    """Human-readable message for display; raw detail only for unclassified errors."""
    if error_class is ErrorClass.QUOTA_EXCEEDED:
        return QUOTA_MESSAGE
    if error_class is ErrorClass.TRANSIENT_SERVER_ERROR:
        return TRANSIENT_MESSAGE
    if error_class is ErrorClass.NO_IMAGE_RETURNED:
        return NO_IMAGE_MESSAGE
    message = str(error) if error is not None else ""
    return message or FALLBACK_MESSAGE


def to_failure(error: BaseException) -> Failure:
    error_class = classify_error(error)
    return Failure(error_class=error_class, message=user_message(error_class, error))


def backoff_delay_ms(attempt: int, base_delay_ms: int = BASE_RETRY_DELAY_MS) -> int:
    """Delay before the retry that follows the given (1-based) attempt: 1s, 2s, 4s..."""
    return base_delay_ms * (2 ** (attempt - 1))


async def sleep_ms(milliseconds: int) -> None:
    await asyncio.sleep(milliseconds / 1000)


# =============================================================================
# State Machine
# =============================================================================

class ExecutorState(str, Enum):
    IDLE = "Idle"
    ATTEMPTING = "Attempting"
    RETRY_WAIT = "RetryWait"
    SUCCESS = "Success"
    TERMINAL = "Terminal"


@dataclass(frozen=True)
class Transition:
    """One step of an attempt sequence, recorded for inspection."""
    state: ExecutorState
    attempt: int = 0
    delay_ms: Optional[int] = None


class GenerationExecutor:
    """
    Submits RequestDescriptors to Gemini and produces GenerationOutcomes.

    All collaborators are injectable:
        credential_provider - returns the API key; called once per execute()
        transport           - performs one call, returns a data URI or raises
        delay               - awaitable taking milliseconds, used between attempts

    The transport is blocking (requests), so it is run in a worker thread to
    keep the event loop free during the call as well as during backoff.
    """

    def __init__(
        self,
        credential_provider: Optional[CredentialProvider] = None,
        transport: Optional[Transport] = None,
        delay: Optional[Delay] = None,
        max_attempts: int = MAX_ATTEMPTS,
        base_delay_ms: int = BASE_RETRY_DELAY_MS,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if credential_provider is None:
            from .credentials import get_api_key
            credential_provider = get_api_key
        if transport is None:
            from .gemini_client import post_generate_content
            transport = post_generate_content
        self._credential_provider = credential_provider
        self._transport = transport
        self._delay = delay or sleep_ms
        self.max_attempts = max_attempts
        self.base_delay_ms = base_delay_ms
        self.transitions: List[Transition] = []

    @property
    def state(self) -> ExecutorState:
        """State reached by the most recent execute() call."""
        return self.transitions[-1].state if self.transitions else ExecutorState.IDLE

    async def execute(self, descriptor: RequestDescriptor) -> GenerationOutcome:
        """
        Run one generation, retrying transient server errors.

        Args:
            descriptor: A composed, valid request.

        Returns:
            Success with the image data URI, or Failure with the category and
            display message of the last error encountered.
        """
        transitions = [Transition(ExecutorState.IDLE)]
        # Published as soon as the run starts; each run owns its own list
        self.transitions = transitions
        log_generation_start(descriptor.label, descriptor.model_id.value, len(descriptor.attachments))

        # Re-read on every invocation so a newly selected key is picked up
        api_key = self._credential_provider()
        last_error: Optional[BaseException] = None

        for attempt in range(1, self.max_attempts + 1):
            transitions.append(Transition(ExecutorState.ATTEMPTING, attempt))
            try:
                data_uri = await asyncio.to_thread(self._transport, api_key, descriptor)
            except Exception as e:
                last_error = e
                log_warning(f"Attempt {attempt}/{self.max_attempts} failed ({descriptor.label}): {e}")

                if attempt < self.max_attempts and is_transient_error(e):
                    wait_ms = backoff_delay_ms(attempt, self.base_delay_ms)
                    transitions.append(Transition(ExecutorState.RETRY_WAIT, attempt, wait_ms))
                    log_info(f"Transient server error; retrying in {wait_ms} ms")
                    await self._delay(wait_ms)
                    continue
                break
            else:
                transitions.append(Transition(ExecutorState.SUCCESS, attempt))
                log_generation_complete(descriptor.label, True, f"attempt {attempt}")
                return Success(image_data_uri=data_uri)

        transitions.append(Transition(ExecutorState.TERMINAL, attempt))
        failure = to_failure(last_error)
        log_generation_complete(
            descriptor.label,
            False,
            f"{failure.error_class.value}: {last_error}",
        )
        return failure
