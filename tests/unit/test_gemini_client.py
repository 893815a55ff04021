"""Tests for banana_studio.api.gemini_client: payload building and response parsing.

requests.post is patched; nothing leaves the process.
"""

import base64
from unittest.mock import MagicMock, patch

import pytest
import requests

from banana_studio.api.composer import compose_request
from banana_studio.api.exceptions import GeminiAPIError, NoImageReturnedError
from banana_studio.api.gemini_client import (
    _extract_inline_image_from_response,
    build_api_url,
    build_payload,
    post_generate_content,
    to_data_uri,
)
from banana_studio.core.models import ImageResolution, Mode, ModelVersion, RawInputs

IMAGE_B64 = base64.b64encode(b"\x89PNG\r\n\x1a\nfake").decode("utf-8")


def fake_response(status: int = 200, json_body=None, text: str = "") -> MagicMock:
    response = MagicMock()
    response.status_code = status
    response.ok = 200 <= status < 300
    response.text = text
    if json_body is None:
        response.json.side_effect = ValueError("no json")
    else:
        response.json.return_value = json_body
    return response


def image_body(data: str = IMAGE_B64, key: str = "inlineData") -> dict:
    return {
        "candidates": [
            {
                "content": {
                    "parts": [
                        {"text": "Here is your image."},
                        {key: {"mimeType": "image/png", "data": data}},
                    ]
                },
                "finishReason": "STOP",
            }
        ]
    }


@pytest.fixture
def remix_descriptor(style_image, subject_image):
    inputs = RawInputs(
        primary_image=style_image,
        secondary_image=subject_image,
        resolution=ImageResolution.RES_4K,
    )
    return compose_request(Mode.STYLE_REMIX, inputs)


class TestBuildPayload:
    def test_attachments_then_trailing_text(self, remix_descriptor, style_image, subject_image):
        parts = build_payload(remix_descriptor)["contents"][0]["parts"]

        assert len(parts) == 3
        assert parts[0]["inline_data"] == {
            "mime_type": "image/png",
            "data": base64.b64encode(style_image.data).decode("utf-8"),
        }
        assert parts[1]["inline_data"]["mime_type"] == "image/jpeg"
        assert parts[1]["inline_data"]["data"] == base64.b64encode(subject_image.data).decode("utf-8")
        assert parts[2] == {"text": remix_descriptor.prompt_text}

    def test_image_config_with_resolution(self, remix_descriptor):
        config = build_payload(remix_descriptor)["generationConfig"]
        assert config["imageConfig"] == {"aspectRatio": "1:1", "imageSize": "4K"}
        assert "IMAGE" in config["responseModalities"]

    def test_image_config_without_resolution_for_flash(self):
        descriptor = compose_request(
            Mode.GENERATE,
            RawInputs(prompt="x", resolution=ImageResolution.RES_4K),
            model=ModelVersion.GEMINI_2_5_FLASH_IMAGE,
        )
        image_config = build_payload(descriptor)["generationConfig"]["imageConfig"]
        assert image_config == {"aspectRatio": "1:1"}

    def test_text_only_payload(self):
        descriptor = compose_request(Mode.GENERATE, RawInputs(prompt="a cat"))
        assert build_payload(descriptor)["contents"][0]["parts"] == [{"text": "a cat"}]


class TestExtractImage:
    def test_snake_case_field(self):
        assert _extract_inline_image_from_response(image_body(key="inline_data")) == IMAGE_B64

    def test_first_image_across_candidates(self):
        body = {
            "candidates": [
                {"content": {"parts": [{"text": "no image here"}]}},
                {"content": {"parts": [{"inlineData": {"data": "Zmlyc3Q="}}]}},
                {"content": {"parts": [{"inlineData": {"data": "c2Vjb25k"}}]}},
            ]
        }
        assert _extract_inline_image_from_response(body) == "Zmlyc3Q="

    @pytest.mark.parametrize(
        "body",
        [
            {},
            {"candidates": []},
            {"candidates": [{"finishReason": "SAFETY"}]},
            {"candidates": [{"content": {"parts": [{"inlineData": {"data": ""}}]}}]},
        ],
    )
    def test_missing_image(self, body):
        assert _extract_inline_image_from_response(body) is None


class TestToDataUri:
    def test_png_prefix(self):
        assert to_data_uri(IMAGE_B64) == f"data:image/png;base64,{IMAGE_B64}"

    def test_malformed_payload(self):
        with pytest.raises(GeminiAPIError, match="malformed"):
            to_data_uri("not base64!!")


class TestPostGenerateContent:
    def test_success(self, remix_descriptor):
        with patch("banana_studio.api.gemini_client.requests.post",
                   return_value=fake_response(json_body=image_body())) as post:
            result = post_generate_content("secret", remix_descriptor, timeout=5)

        assert result == f"data:image/png;base64,{IMAGE_B64}"
        args, kwargs = post.call_args
        assert args[0] == build_api_url("gemini-3-pro-image-preview")
        assert args[0].endswith("/models/gemini-3-pro-image-preview:generateContent")
        assert kwargs["headers"]["x-goog-api-key"] == "secret"
        assert kwargs["json"] == build_payload(remix_descriptor)
        assert kwargs["timeout"] == 5

    def test_http_error_keeps_status(self, remix_descriptor):
        body = {"error": {"code": 429, "message": "Quota exceeded", "status": "RESOURCE_EXHAUSTED"}}
        with patch("banana_studio.api.gemini_client.requests.post",
                   return_value=fake_response(429, body)):
            with pytest.raises(GeminiAPIError) as exc_info:
                post_generate_content("k", remix_descriptor, timeout=5)

        error = exc_info.value
        assert error.status_code == 429
        assert error.api_status == "RESOURCE_EXHAUSTED"
        assert "429" in str(error)
        assert "Quota exceeded" in str(error)

    def test_http_error_without_json_body(self, remix_descriptor):
        with patch("banana_studio.api.gemini_client.requests.post",
                   return_value=fake_response(503, text="Service Unavailable")):
            with pytest.raises(GeminiAPIError) as exc_info:
                post_generate_content("k", remix_descriptor, timeout=5)

        assert exc_info.value.status_code == 503
        assert exc_info.value.api_status is None

    def test_no_image_in_response(self, remix_descriptor):
        body = {"candidates": [{"content": {"parts": [{"text": "I can't do that"}]},
                                "finishReason": "IMAGE_SAFETY"}]}
        with patch("banana_studio.api.gemini_client.requests.post",
                   return_value=fake_response(json_body=body)):
            with pytest.raises(NoImageReturnedError) as exc_info:
                post_generate_content("k", remix_descriptor, timeout=5)

        assert exc_info.value.finish_reason == "IMAGE_SAFETY"

    def test_prompt_block_reason(self, remix_descriptor):
        body = {"promptFeedback": {"blockReason": "PROHIBITED_CONTENT"}}
        with patch("banana_studio.api.gemini_client.requests.post",
                   return_value=fake_response(json_body=body)):
            with pytest.raises(NoImageReturnedError) as exc_info:
                post_generate_content("k", remix_descriptor, timeout=5)

        assert exc_info.value.finish_reason == "PROHIBITED_CONTENT"

    def test_transport_error_is_wrapped(self, remix_descriptor):
        with patch("banana_studio.api.gemini_client.requests.post",
                   side_effect=requests.ConnectionError("DNS failure")):
            with pytest.raises(GeminiAPIError) as exc_info:
                post_generate_content("k", remix_descriptor, timeout=5)

        assert exc_info.value.status_code is None
        assert "DNS failure" in str(exc_info.value)

    def test_timeout_from_config(self, remix_descriptor, isolated_config):
        isolated_config.write_text('{"request_timeout": 42}', encoding="utf-8")
        with patch("banana_studio.api.gemini_client.requests.post",
                   return_value=fake_response(json_body=image_body())) as post:
            post_generate_content("k", remix_descriptor)

        assert post.call_args.kwargs["timeout"] == 42.0
