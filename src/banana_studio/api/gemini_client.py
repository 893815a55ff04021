"""
Gemini API client for image generation.

Single network boundary of the package: builds the generateContent payload,
performs one HTTP call, and parses the response. Retries live in the
executor, not here.
"""

import base64
import binascii
from typing import Any, Dict, List, Optional

import requests

from ..config import GEMINI_API_BASE
from ..core.models import RequestDescriptor
from ..logging_utils import log_api_call, log_debug
from .credentials import get_request_timeout
from .exceptions import GeminiAPIError, NoImageReturnedError


def build_api_url(model_id: str) -> str:
    """generateContent endpoint for the given model."""
    return f"{GEMINI_API_BASE}/models/{model_id}:generateContent"


def build_payload(descriptor: RequestDescriptor) -> Dict[str, Any]:
    """
    Build the JSON body for a generateContent call.

    Attachments go first, in descriptor order, followed by the prompt as the
    trailing text part.

    Args:
        descriptor: The composed request.

    Returns:
        JSON-serializable request body.
    """
    parts: List[dict] = [attachment.to_part() for attachment in descriptor.attachments]
    parts.append({"text": descriptor.prompt_text})

    return {
        "contents": [{"parts": parts}],
        "generationConfig": {
            "responseModalities": ["TEXT", "IMAGE"],
            "imageConfig": descriptor.output_config.to_image_config(),
        },
    }


def _extract_inline_image_from_response(data: dict) -> Optional[str]:
    """
    Return the base64 data of the first inline image in a Gemini response.

    Scans every candidate's parts in order. Handles both 'inlineData' and
    'inline_data' field naming.

    Args:
        data: Parsed JSON response from Gemini API.

    Returns:
        Base64 image data, or None if no image found.
    """
    candidates = data.get("candidates") or []
    for candidate in candidates:
        content = candidate.get("content") or {}
        for part in content.get("parts") or []:
            blob = part.get("inlineData") or part.get("inline_data")
            if blob and blob.get("data"):
                return blob["data"]
    return None


def _first_finish_reason(data: dict) -> Optional[str]:
    candidates = data.get("candidates") or []
    if candidates:
        return candidates[0].get("finishReason")
    # Prompt-level blocks come back without candidates
    feedback = data.get("promptFeedback") or {}
    return feedback.get("blockReason")


def to_data_uri(image_b64: str) -> str:
    """
    Re-encode a base64 image payload as a PNG data URI.

    Raises:
        GeminiAPIError: If the payload is not valid base64.
    """
    try:
        raw_bytes = base64.b64decode(image_b64, validate=True)
    except (binascii.Error, ValueError) as e:
        raise GeminiAPIError(f"Gemini returned malformed image data: {e}") from e
    return "data:image/png;base64," + base64.b64encode(raw_bytes).decode("utf-8")


def _error_from_response(response: requests.Response) -> GeminiAPIError:
    """Build a GeminiAPIError from a non-2xx response, keeping Google's status string."""
    api_status = None
    detail = response.text[:500]
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and isinstance(body.get("error"), dict):
        error = body["error"]
        api_status = error.get("status")
        detail = error.get("message") or detail
    message = f"Gemini API error {response.status_code}"
    if api_status:
        message += f" {api_status}"
    if detail:
        message += f": {detail}"
    return GeminiAPIError(message, status_code=response.status_code, api_status=api_status)


def post_generate_content(
    api_key: str,
    descriptor: RequestDescriptor,
    timeout: Optional[float] = None,
) -> str:
    """
    Perform one generateContent call and return the image as a data URI.

    Args:
        api_key: Google Gemini API key.
        descriptor: The composed request.
        timeout: Seconds before the call is abandoned (config default if None).

    Returns:
        "data:image/png;base64,..." URI of the first image in the response.

    Raises:
        GeminiAPIError: On HTTP or transport failure.
        NoImageReturnedError: If the response contains no image.
    """
    model_id = descriptor.model_id.value
    context = f"{descriptor.label} ({model_id})"
    headers = {"Content-Type": "application/json", "x-goog-api-key": api_key}
    if timeout is None:
        timeout = get_request_timeout()

    log_debug(f"Gemini API call starting: {context}")

    try:
        response = requests.post(
            build_api_url(model_id),
            headers=headers,
            json=build_payload(descriptor),
            timeout=timeout,
        )
    except requests.RequestException as e:
        log_api_call(context, False, f"Transport error: {e}")
        raise GeminiAPIError(f"Could not reach Gemini API: {e}") from e

    if not response.ok:
        error = _error_from_response(response)
        log_api_call(context, False, str(error)[:200])
        raise error

    try:
        data = response.json()
    except ValueError as e:
        log_api_call(context, False, "Response was not JSON")
        raise GeminiAPIError(f"Gemini API returned an unreadable response: {e}") from e

    image_b64 = _extract_inline_image_from_response(data)
    if image_b64 is None:
        finish_reason = _first_finish_reason(data)
        log_api_call(context, False, f"No image data in response (finishReason={finish_reason})")
        raise NoImageReturnedError("No image generated in the response.", finish_reason=finish_reason)

    data_uri = to_data_uri(image_b64)
    log_api_call(context, True, f"Image received ({len(image_b64)} base64 chars)")
    return data_uri
