"""
Request/Response schemas for the machine learning server.

Requests map a model task to the model types it runs:

    {"facial-recognition": {"detection": {"modelName": "buffalo_l",
                                          "options": {"minScore": 0.7}},
                            "recognition": {"modelName": "buffalo_l"}}}

Responses are validated per task; a response missing the fields its task
promises is rejected instead of being handed back half-filled.
"""
from enum import Enum
from typing import Any, Dict, List, Optional

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, RootModel, model_validator

from ml_dispatch.core.config import Settings, settings as default_settings


class ModelTask(str, Enum):
    """Tasks understood by the machine learning server."""
    FACIAL_RECOGNITION = "facial-recognition"
    SEARCH = "clip"


class ModelType(str, Enum):
    """Model variants within a task."""
    DETECTION = "detection"
    RECOGNITION = "recognition"
    VISUAL = "visual"
    TEXTUAL = "textual"


# =============================================================================
# Model configuration
# =============================================================================

class CLIPConfig(BaseModel):
    """CLIP model used for image and text embeddings."""
    model_config = ConfigDict(frozen=True, protected_namespaces=())

    model_name: str = Field(..., min_length=1, description="CLIP model name")

    @classmethod
    def from_settings(cls, config: Optional[Settings] = None) -> "CLIPConfig":
        config = config or default_settings
        return cls(model_name=config.clip_model)


class FaceDetectionOptions(BaseModel):
    """Face detection model and its minimum detection score."""
    model_config = ConfigDict(frozen=True, protected_namespaces=())

    model_name: str = Field(..., min_length=1, description="Facial recognition model name")
    min_score: float = Field(0.7, ge=0, le=1, description="Minimum detection confidence")

    @classmethod
    def from_settings(cls, config: Optional[Settings] = None) -> "FaceDetectionOptions":
        config = config or default_settings
        return cls(
            model_name=config.facial_recognition_model,
            min_score=config.face_min_score,
        )


# =============================================================================
# Requests
# =============================================================================

class ModelSpec(BaseModel):
    """One model entry of a request."""
    model_config = ConfigDict(frozen=True, populate_by_name=True, protected_namespaces=())

    model_name: str = Field(..., alias="modelName")
    options: Optional[Dict[str, Any]] = None


class MachineLearningRequest(RootModel[Dict[ModelTask, Dict[ModelType, ModelSpec]]]):
    """Task -> model type -> model spec, sent as the `entries` form field."""
    model_config = ConfigDict(frozen=True)

    def to_json(self) -> str:
        """Serialize with wire names, leaving out unset options."""
        return self.model_dump_json(by_alias=True, exclude_none=True)


# =============================================================================
# Responses
# =============================================================================

class BoundingBox(BaseModel):
    """Face bounding box in image pixels."""
    x1: float
    y1: float
    x2: float
    y2: float


class DetectedFace(BaseModel):
    """Single detected face with its recognition embedding."""
    model_config = ConfigDict(populate_by_name=True)

    bounding_box: BoundingBox = Field(..., alias="boundingBox")
    embedding: List[float]
    score: float


class ClipEmbedding(BaseModel):
    """CLIP embedding vector returned by the search task."""
    embedding: List[float] = Field(..., min_length=1)

    @model_validator(mode="before")
    @classmethod
    def wrap_bare_vector(cls, data: Any) -> Any:
        # Servers may send the search branch as the vector itself
        if isinstance(data, list):
            return {"embedding": data}
        return data

    def to_numpy(self) -> np.ndarray:
        """Embedding as a float32 numpy vector."""
        return np.asarray(self.embedding, dtype=np.float32)


class VisualResponse(BaseModel):
    """Image dimensions included with every image prediction."""
    model_config = ConfigDict(populate_by_name=True)

    image_height: int = Field(..., alias="imageHeight")
    image_width: int = Field(..., alias="imageWidth")


class FacialRecognitionResponse(VisualResponse):
    """Response to a facial recognition request."""
    faces: List[DetectedFace] = Field(..., alias=ModelTask.FACIAL_RECOGNITION.value)


class ClipVisualResponse(VisualResponse):
    """Response to a CLIP visual request."""
    search: ClipEmbedding = Field(..., alias=ModelTask.SEARCH.value)


class ClipTextualResponse(BaseModel):
    """Response to a CLIP textual request."""
    model_config = ConfigDict(populate_by_name=True)

    search: ClipEmbedding = Field(..., alias=ModelTask.SEARCH.value)


class FaceDetectionResult(BaseModel):
    """Faces found in an image, as returned by detect_faces."""
    model_config = ConfigDict(populate_by_name=True)

    image_height: int = Field(..., alias="imageHeight")
    image_width: int = Field(..., alias="imageWidth")
    faces: List[DetectedFace]
