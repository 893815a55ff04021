#!/usr/bin/env python3
"""
pipeline.py

Entry point used by UI layers: compose the request for the chosen mode,
run it, and hand back a GenerationOutcome.

Flow (per user action):
  - Validate inputs and build the request descriptor (no network on failure)
  - Execute against Gemini with retry/backoff
  - Return Success(data URI) or Failure(category, message)
"""

import asyncio
from typing import Optional, Union

from .api.composer import compose_request
from .api.credentials import get_default_model
from .api.exceptions import MissingInputError
from .api.executor import GenerationExecutor
from .config import DEFAULT_MODEL
from .core.models import (
    ErrorClass,
    Failure,
    GenerationOutcome,
    Mode,
    ModelVersion,
    RawInputs,
)
from .logging_utils import log_warning


def resolve_model(model: Optional[Union[ModelVersion, str]] = None) -> ModelVersion:
    """
    Pick the model for a request: explicit choice, then config, then Pro.

    An unknown model name in the config file is ignored with a warning.
    """
    if model is not None:
        return ModelVersion(model)
    configured = get_default_model()
    try:
        return ModelVersion(configured)
    except ValueError:
        log_warning(f"Unknown default_model {configured!r} in config; using {DEFAULT_MODEL}")
        return ModelVersion(DEFAULT_MODEL)


async def run_generation(
    mode: Mode,
    inputs: RawInputs,
    executor: Optional[GenerationExecutor] = None,
    model: Optional[Union[ModelVersion, str]] = None,
) -> GenerationOutcome:
    """
    Compose and execute one generation.

    Args:
        mode: Selected transformation mode.
        inputs: The user's current inputs.
        executor: Executor to use (a default one is created if None).
        model: Optional model override.

    Returns:
        The outcome. Missing inputs come back as a MissingInput failure
        without any network call.
    """
    try:
        descriptor = compose_request(mode, inputs, model=resolve_model(model))
    except MissingInputError as e:
        log_warning(f"Generation not started ({Mode(mode).value}): {e}")
        return Failure(error_class=ErrorClass.MISSING_INPUT, message=str(e))

    if executor is None:
        executor = GenerationExecutor()
    return await executor.execute(descriptor)


def generate_sync(
    mode: Mode,
    inputs: RawInputs,
    executor: Optional[GenerationExecutor] = None,
    model: Optional[Union[ModelVersion, str]] = None,
) -> GenerationOutcome:
    """Blocking wrapper around run_generation() for synchronous callers."""
    return asyncio.run(run_generation(mode, inputs, executor=executor, model=model))
