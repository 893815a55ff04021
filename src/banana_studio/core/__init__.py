"""
Core data layer.

Contains the enums and data models shared by the composer, the executor
and any UI layer.
"""

from .models import (
    AspectRatio,
    Attachment,
    ErrorClass,
    Failure,
    GenerationOutcome,
    ImageResolution,
    Mode,
    ModelVersion,
    OutputConfig,
    RawInputs,
    ReferenceImage,
    RequestDescriptor,
    Success,
)

__all__ = [
    "AspectRatio",
    "Attachment",
    "ErrorClass",
    "Failure",
    "GenerationOutcome",
    "ImageResolution",
    "Mode",
    "ModelVersion",
    "OutputConfig",
    "RawInputs",
    "ReferenceImage",
    "RequestDescriptor",
    "Success",
]
