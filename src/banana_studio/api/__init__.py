"""
API module for Gemini interactions.

Handles all communication with Google Gemini API including:
- Authentication and configuration
- Request composition and prompt building
- Image generation calls
- Retry logic and error classification
"""

from .composer import compose_request, MODE_COMPOSERS
from .credentials import (
    get_api_key,
    load_config,
    save_config,
    interactive_api_key_setup,
)
from .exceptions import (
    BananaStudioError,
    GeminiAPIError,
    MissingInputError,
    NoImageReturnedError,
)
from .executor import (
    ExecutorState,
    GenerationExecutor,
    Transition,
    backoff_delay_ms,
    classify_error,
    user_message,
)
from .gemini_client import build_payload, post_generate_content
from .prompt_builders import (
    build_style_remix_prompt,
    build_face_swap_prompt,
    build_edit_prompt,
    build_generate_prompt,
)

__all__ = [
    # Composer
    "compose_request",
    "MODE_COMPOSERS",
    # Credentials
    "get_api_key",
    "load_config",
    "save_config",
    "interactive_api_key_setup",
    # Errors
    "BananaStudioError",
    "GeminiAPIError",
    "MissingInputError",
    "NoImageReturnedError",
    # Executor
    "ExecutorState",
    "GenerationExecutor",
    "Transition",
    "backoff_delay_ms",
    "classify_error",
    "user_message",
    # Transport
    "build_payload",
    "post_generate_content",
    # Prompt builders
    "build_style_remix_prompt",
    "build_face_swap_prompt",
    "build_edit_prompt",
    "build_generate_prompt",
]
