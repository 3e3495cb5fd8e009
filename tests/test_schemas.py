"""
Tests for request and response schemas.
"""
import numpy as np
import pytest
from pydantic import ValidationError

from ml_dispatch.core.config import Settings
from ml_dispatch.model_client.schemas import (
    CLIPConfig,
    ClipEmbedding,
    ClipVisualResponse,
    FaceDetectionOptions,
    FacialRecognitionResponse,
    MachineLearningRequest,
    ModelSpec,
    ModelTask,
    ModelType,
)


class TestMachineLearningRequest:
    """Tests for request serialization."""

    def test_wire_names(self):
        request = MachineLearningRequest({
            ModelTask.FACIAL_RECOGNITION: {
                ModelType.DETECTION: ModelSpec(model_name="buffalo_l", options={"minScore": 0.7}),
                ModelType.RECOGNITION: ModelSpec(model_name="buffalo_l"),
            },
        })
        assert request.to_json() == (
            '{"facial-recognition":{"detection":{"modelName":"buffalo_l","options":{"minScore":0.7}},'
            '"recognition":{"modelName":"buffalo_l"}}}'
        )

    def test_unset_options_are_omitted(self):
        request = MachineLearningRequest({ModelTask.SEARCH: {ModelType.VISUAL: ModelSpec(model_name="m")}})
        assert request.to_json() == '{"clip":{"visual":{"modelName":"m"}}}'

    def test_model_spec_accepts_wire_name(self):
        assert ModelSpec(modelName="m").model_name == "m"

    def test_model_spec_is_frozen(self):
        spec = ModelSpec(model_name="m")
        with pytest.raises(ValidationError):
            spec.model_name = "other"

    def test_unknown_task_rejected(self):
        with pytest.raises(ValidationError):
            MachineLearningRequest({"ocr": {"visual": {"modelName": "m"}}})


class TestModelConfig:
    """Tests for model configuration defaults."""

    def test_clip_from_settings(self):
        config = CLIPConfig.from_settings(Settings(clip_model="ViT-L-14__openai"))
        assert config.model_name == "ViT-L-14__openai"

    def test_face_options_from_settings(self):
        options = FaceDetectionOptions.from_settings(
            Settings(facial_recognition_model="antelopev2", face_min_score=0.5)
        )
        assert options.model_name == "antelopev2"
        assert options.min_score == 0.5

    def test_min_score_range(self):
        with pytest.raises(ValidationError):
            FaceDetectionOptions(model_name="m", min_score=1.5)

    def test_empty_model_name_rejected(self):
        with pytest.raises(ValidationError):
            CLIPConfig(model_name="")


class TestResponses:
    """Tests for response validation."""

    def test_facial_recognition(self):
        response = FacialRecognitionResponse.model_validate({
            "imageHeight": 10,
            "imageWidth": 20,
            "facial-recognition": [{
                "boundingBox": {"x1": 0, "y1": 0, "x2": 5, "y2": 5},
                "embedding": [0.1, 0.2],
                "score": 0.8,
            }],
        })
        assert response.image_height == 10
        assert response.faces[0].bounding_box.y2 == 5

    def test_facial_recognition_requires_dimensions(self):
        with pytest.raises(ValidationError):
            FacialRecognitionResponse.model_validate({"facial-recognition": []})

    def test_clip_visual_wraps_bare_vector(self):
        response = ClipVisualResponse.model_validate({"imageHeight": 1, "imageWidth": 1, "clip": [0.1, 0.2]})
        assert response.search == ClipEmbedding(embedding=[0.1, 0.2])

    def test_empty_embedding_rejected(self):
        with pytest.raises(ValidationError):
            ClipEmbedding.model_validate([])

    def test_non_numeric_embedding_rejected(self):
        with pytest.raises(ValidationError):
            ClipEmbedding.model_validate({"embedding": ["a", "b"]})

    def test_to_numpy(self):
        vector = ClipEmbedding(embedding=[0.5, 0.25]).to_numpy()
        assert vector.dtype == np.float32
        np.testing.assert_allclose(vector, [0.5, 0.25])
