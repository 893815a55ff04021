"""
Data models for Banana Studio.

Contains the enums and dataclasses that describe a generation: the user's
raw inputs, the composed request sent to Gemini, and the outcome handed
back to the UI layer.
"""

import base64
import mimetypes
from dataclasses import dataclass, field
from enum import Enum
from io import BytesIO
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

from PIL import Image, UnidentifiedImageError


class Mode(str, Enum):
    """User-selected transformation type."""
    STYLE_REMIX = "STYLE_REMIX"
    FACE_SWAP = "FACE_SWAP"
    EDIT = "EDIT"
    GENERATE = "GENERATE"


class ModelVersion(str, Enum):
    GEMINI_3_PRO_IMAGE = "gemini-3-pro-image-preview"  # Nano Banana Pro
    GEMINI_2_5_FLASH_IMAGE = "gemini-2.5-flash-image"  # Nano Banana

    @property
    def supports_resolution(self) -> bool:
        """Only the Pro model accepts an output image size."""
        return self is ModelVersion.GEMINI_3_PRO_IMAGE


class ImageResolution(str, Enum):
    RES_1K = "1K"
    RES_2K = "2K"
    RES_4K = "4K"


class AspectRatio(str, Enum):
    SQUARE = "1:1"
    PORTRAIT = "9:16"
    LANDSCAPE = "16:9"
    STANDARD_LANDSCAPE = "4:3"
    STANDARD_PORTRAIT = "3:4"


class ErrorClass(str, Enum):
    """Coarse failure categories surfaced to the UI layer."""
    MISSING_INPUT = "MissingInput"
    QUOTA_EXCEEDED = "QuotaExceeded"
    TRANSIENT_SERVER_ERROR = "TransientServerError"
    NO_IMAGE_RETURNED = "NoImageReturned"
    UNCLASSIFIED = "Unclassified"


# =============================================================================
# Inputs
# =============================================================================

@dataclass(frozen=True)
class ReferenceImage:
    """
    An uploaded reference image: opaque bytes plus their MIME type.

    The bytes are never decoded; they are only base64-encoded for transport.
    """
    data: bytes
    mime_type: str

    def __post_init__(self) -> None:
        if not self.data:
            raise ValueError("Reference image is empty")
        if not self.mime_type or not self.mime_type.startswith("image/"):
            raise ValueError(f"Unsupported reference file type: {self.mime_type or 'unknown'}")

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "ReferenceImage":
        """
        Read an image file from disk.

        The MIME type comes from the file extension when it is a known image
        type; otherwise Pillow identifies the format from the file header.

        Raises:
            ValueError: If the file is not a recognizable image.
        """
        path = Path(path)
        data = path.read_bytes()
        mime_type, _ = mimetypes.guess_type(path.name)
        if not mime_type or not mime_type.startswith("image/"):
            mime_type = sniff_image_mime_type(data)
        return cls(data=data, mime_type=mime_type or "")


def sniff_image_mime_type(data: bytes) -> Optional[str]:
    """Identify an image's MIME type from its header, or None if unknown."""
    try:
        with Image.open(BytesIO(data)) as img:
            return Image.MIME.get(img.format or "")
    except (UnidentifiedImageError, OSError):
        return None


@dataclass
class RawInputs:
    """
    Everything the user has entered so far, mutable while editing.

    Slot meaning depends on the mode:
        primary_image   - style reference (remix), face reference (face swap),
                          image to edit (edit)
        secondary_image - subject (remix), target/body image (face swap)
    """
    primary_image: Optional[ReferenceImage] = None
    secondary_image: Optional[ReferenceImage] = None
    prompt: str = ""
    resolution: ImageResolution = ImageResolution.RES_1K
    aspect_ratio: AspectRatio = AspectRatio.SQUARE

    def clear(self) -> None:
        """Reset images and text (done whenever the user switches mode)."""
        self.primary_image = None
        self.secondary_image = None
        self.prompt = ""


# =============================================================================
# Request
# =============================================================================

@dataclass(frozen=True)
class Attachment:
    """One image sent to Gemini. Position in the request is significant."""
    data: bytes
    mime_type: str

    @classmethod
    def from_reference(cls, image: ReferenceImage) -> "Attachment":
        return cls(data=image.data, mime_type=image.mime_type)

    def to_part(self) -> Dict[str, Dict[str, str]]:
        """REST content part with the bytes base64-encoded."""
        return {
            "inline_data": {
                "mime_type": self.mime_type,
                "data": base64.b64encode(self.data).decode("utf-8"),
            }
        }


@dataclass(frozen=True)
class OutputConfig:
    aspect_ratio: AspectRatio = AspectRatio.SQUARE
    resolution: Optional[ImageResolution] = None

    def to_image_config(self) -> Dict[str, str]:
        """Gemini imageConfig; imageSize only when a resolution is set."""
        image_config = {"aspectRatio": self.aspect_ratio.value}
        if self.resolution is not None:
            image_config["imageSize"] = self.resolution.value
        return image_config


@dataclass(frozen=True)
class RequestDescriptor:
    """Fully composed, validated specification of one generation call."""
    prompt_text: str
    model_id: ModelVersion
    attachments: Tuple[Attachment, ...] = ()
    output_config: OutputConfig = field(default_factory=OutputConfig)
    mode: Optional[Mode] = None

    @property
    def label(self) -> str:
        """Short name used in log lines."""
        return self.mode.value if self.mode else "request"


# =============================================================================
# Outcome
# =============================================================================

@dataclass(frozen=True)
class Success:
    image_data_uri: str
    ok = True

    def image_bytes(self) -> bytes:
        """Decode the data URI payload (used for downloads)."""
        _, _, payload = self.image_data_uri.partition("base64,")
        return base64.b64decode(payload)


@dataclass(frozen=True)
class Failure:
    error_class: ErrorClass
    message: str
    ok = False

    @property
    def requires_new_credential(self) -> bool:
        """True when the UI should offer to select a billable API key."""
        return self.error_class is ErrorClass.QUOTA_EXCEEDED


GenerationOutcome = Union[Success, Failure]
