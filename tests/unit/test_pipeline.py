"""Tests for banana_studio.pipeline: compose-and-execute entry point."""

import json
from unittest.mock import MagicMock

import pytest

from banana_studio.api.executor import GenerationExecutor
from banana_studio.core.models import (
    ErrorClass,
    Failure,
    Mode,
    ModelVersion,
    RawInputs,
    Success,
)
from banana_studio.pipeline import generate_sync, resolve_model, run_generation

DATA_URI = "data:image/png;base64,AAAA"


@pytest.fixture
def transport():
    return MagicMock(return_value=DATA_URI)


@pytest.fixture
def executor(transport, delay_recorder):
    return GenerationExecutor(
        credential_provider=lambda: "k", transport=transport, delay=delay_recorder
    )


@pytest.mark.asyncio
@pytest.mark.parametrize("mode", [Mode.STYLE_REMIX, Mode.FACE_SWAP])
async def test_missing_reference_makes_no_call(mode, executor, transport, style_image):
    outcome = await run_generation(mode, RawInputs(primary_image=style_image), executor=executor)

    assert isinstance(outcome, Failure)
    assert outcome.error_class is ErrorClass.MISSING_INPUT
    assert "Please upload both" in outcome.message
    transport.assert_not_called()


@pytest.mark.asyncio
async def test_successful_generation(executor, transport):
    outcome = await run_generation(Mode.GENERATE, RawInputs(prompt="a bonsai"), executor=executor)

    assert outcome == Success(DATA_URI)
    descriptor = transport.call_args.args[1]
    assert descriptor.prompt_text == "a bonsai"
    assert descriptor.model_id is ModelVersion.GEMINI_3_PRO_IMAGE


@pytest.mark.asyncio
async def test_model_override(executor, transport):
    await run_generation(
        Mode.GENERATE,
        RawInputs(prompt="x"),
        executor=executor,
        model="gemini-2.5-flash-image",
    )
    assert transport.call_args.args[1].model_id is ModelVersion.GEMINI_2_5_FLASH_IMAGE


def test_generate_sync(executor):
    assert generate_sync(Mode.GENERATE, RawInputs(prompt="x"), executor=executor).ok


class TestResolveModel:
    def test_explicit(self):
        assert resolve_model("gemini-2.5-flash-image") is ModelVersion.GEMINI_2_5_FLASH_IMAGE

    def test_from_config(self, isolated_config):
        isolated_config.write_text(json.dumps({"default_model": "gemini-2.5-flash-image"}), encoding="utf-8")
        assert resolve_model() is ModelVersion.GEMINI_2_5_FLASH_IMAGE

    def test_unknown_config_value_falls_back(self, isolated_config):
        isolated_config.write_text(json.dumps({"default_model": "imagen-9"}), encoding="utf-8")
        assert resolve_model() is ModelVersion.GEMINI_3_PRO_IMAGE

    def test_unknown_explicit_value_raises(self):
        with pytest.raises(ValueError):
            resolve_model("imagen-9")
