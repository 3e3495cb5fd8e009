"""
Prediction payloads and the multipart form they are sent as.
"""
import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Tuple, Union

from ml_dispatch.model_client.errors import InvalidInput
from ml_dispatch.model_client.schemas import MachineLearningRequest


@dataclass(frozen=True)
class ImagePayload:
    """Image on disk to run inference on."""
    image_path: str


@dataclass(frozen=True)
class TextPayload:
    """Text to run inference on."""
    text: str


ModelPayload = Union[ImagePayload, TextPayload]

# httpx file tuple: (filename, content[, content_type]); a None filename
# makes a plain form field while still forcing a multipart body
FormFiles = Dict[str, Tuple[Any, ...]]


async def read_image(image_path: str) -> bytes:
    """Read image bytes without blocking the event loop."""
    return await asyncio.to_thread(Path(image_path).read_bytes)


async def build_form(payload: ModelPayload, request: MachineLearningRequest) -> FormFiles:
    """
    Build the multipart form for a prediction.

    Args:
        payload: Image or text payload
        request: Task/model configuration, sent as the `entries` field

    Returns:
        Multipart fields suitable for httpx's `files=` argument

    Raises:
        InvalidInput: If the payload is neither an image nor text
    """
    form: FormFiles = {"entries": (None, request.to_json())}

    if isinstance(payload, ImagePayload) and payload.image_path:
        form["image"] = ("blob", await read_image(payload.image_path), "application/octet-stream")
    elif isinstance(payload, TextPayload) and payload.text is not None:
        form["text"] = (None, payload.text)
    else:
        raise InvalidInput(payload)

    return form
