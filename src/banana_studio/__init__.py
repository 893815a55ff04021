"""
Banana Studio

Single-shot image generation with Google Gemini image models: style remix,
face swap, free-form edit and text-to-image.

Package Structure:
    core/       - Enums and data models
    api/        - Request composition, Gemini transport, retrying executor
    pipeline    - Compose-and-execute entry point for UI layers
"""

__version__ = "1.0.0"

# Lazy imports so that `import banana_studio` stays light
def __getattr__(name):
    if name in ("Mode", "RawInputs", "ReferenceImage", "Success", "Failure"):
        from .core import models
        return getattr(models, name)
    if name == "GenerationExecutor":
        from .api.executor import GenerationExecutor
        return GenerationExecutor
    if name in ("run_generation", "generate_sync"):
        from . import pipeline
        return getattr(pipeline, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

__all__ = [
    "__version__",
    "Mode",
    "RawInputs",
    "ReferenceImage",
    "Success",
    "Failure",
    "GenerationExecutor",
    "run_generation",
    "generate_sync",
]
