"""
Request composer.

Turns a mode plus the user's raw inputs into a RequestDescriptor, or
raises MissingInputError. Pure: no I/O.
"""

from typing import Callable, Dict, List, Optional, Tuple

from ..config import DEFAULT_MODEL
from ..core.models import (
    Attachment,
    Mode,
    ModelVersion,
    OutputConfig,
    RawInputs,
    ReferenceImage,
    RequestDescriptor,
)
from .exceptions import MissingInputError
from .prompt_builders import (
    build_edit_prompt,
    build_face_swap_prompt,
    build_generate_prompt,
    build_style_remix_prompt,
)

# (attachments in send order, composed prompt)
Composition = Tuple[List[ReferenceImage], str]


def _has_text(text: str) -> bool:
    return bool(text and text.strip())


def compose_style_remix(inputs: RawInputs) -> Composition:
    """Style reference first, subject second."""
    missing = []
    if inputs.primary_image is None:
        missing.append("reference image")
    if inputs.secondary_image is None:
        missing.append("subject image")
    if missing:
        raise MissingInputError("Please upload both Reference and Subject images.", missing)
    images = [inputs.primary_image, inputs.secondary_image]
    return images, build_style_remix_prompt(inputs.prompt)


def compose_face_swap(inputs: RawInputs) -> Composition:
    """
    Target (body) image first, face reference second.

    The UI collects the face in the primary slot and the target in the
    secondary slot, so the order is swapped here.
    """
    missing = []
    if inputs.primary_image is None:
        missing.append("face reference")
    if inputs.secondary_image is None:
        missing.append("target image")
    if missing:
        raise MissingInputError("Please upload both Face Reference and Target Image.", missing)
    images = [inputs.secondary_image, inputs.primary_image]
    return images, build_face_swap_prompt(inputs.prompt)


def compose_edit(inputs: RawInputs) -> Composition:
    missing = []
    if inputs.primary_image is None:
        missing.append("image to edit")
    if not _has_text(inputs.prompt):
        missing.append("edit instructions")
    if missing:
        if len(missing) == 2:
            message = "Please upload an image to edit and describe the edit."
        elif missing[0] == "image to edit":
            message = "Please upload an image to edit."
        else:
            message = "Please describe the edit you want to make."
        raise MissingInputError(message, missing)
    return [inputs.primary_image], build_edit_prompt(inputs.prompt.strip())


def compose_generate(inputs: RawInputs) -> Composition:
    if not _has_text(inputs.prompt):
        raise MissingInputError("Please enter a text prompt.", ["prompt"])
    return [], build_generate_prompt(inputs.prompt)


MODE_COMPOSERS: Dict[Mode, Callable[[RawInputs], Composition]] = {
    Mode.STYLE_REMIX: compose_style_remix,
    Mode.FACE_SWAP: compose_face_swap,
    Mode.EDIT: compose_edit,
    Mode.GENERATE: compose_generate,
}


def compose_request(
    mode: Mode,
    inputs: RawInputs,
    model: Optional[ModelVersion] = None,
) -> RequestDescriptor:
    """
    Build the request descriptor for one generation.

    Args:
        mode: Selected transformation mode.
        inputs: The user's current inputs.
        model: Model override; defaults to the Pro image model.

    Returns:
        An immutable RequestDescriptor.

    Raises:
        MissingInputError: If a slot required by the mode is empty.
    """
    mode = Mode(mode)
    model = ModelVersion(model if model is not None else DEFAULT_MODEL)

    images, prompt_text = MODE_COMPOSERS[mode](inputs)

    # Resolution is dropped silently for models without variable output size
    resolution = inputs.resolution if model.supports_resolution else None
    output_config = OutputConfig(aspect_ratio=inputs.aspect_ratio, resolution=resolution)

    return RequestDescriptor(
        prompt_text=prompt_text,
        model_id=model,
        attachments=tuple(Attachment.from_reference(img) for img in images),
        output_config=output_config,
        mode=mode,
    )
