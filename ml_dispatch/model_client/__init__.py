"""
Model Client - HTTP client for calling machine learning servers.
Picks a live server from a `;` separated list and dispatches predictions to it.
"""
from ml_dispatch.model_client.client import MachineLearningClient, get_machine_learning_client
from ml_dispatch.model_client.errors import (
    DispatchFailed,
    InvalidInput,
    MachineLearningError,
    MalformedResponse,
    NoAvailableServer,
    PredictionRejected,
)
from ml_dispatch.model_client.payload import ImagePayload, TextPayload
from ml_dispatch.model_client.resolver import (
    EndpointResolver,
    ProbeFailure,
    ProbeSuccess,
    parse_server_list,
)
from ml_dispatch.model_client.schemas import (
    CLIPConfig,
    ClipEmbedding,
    FaceDetectionOptions,
    FaceDetectionResult,
    MachineLearningRequest,
    ModelSpec,
    ModelTask,
    ModelType,
)

__all__ = [
    "MachineLearningClient",
    "get_machine_learning_client",
    "MachineLearningError",
    "NoAvailableServer",
    "InvalidInput",
    "DispatchFailed",
    "PredictionRejected",
    "MalformedResponse",
    "ImagePayload",
    "TextPayload",
    "EndpointResolver",
    "ProbeSuccess",
    "ProbeFailure",
    "parse_server_list",
    "CLIPConfig",
    "ClipEmbedding",
    "FaceDetectionOptions",
    "FaceDetectionResult",
    "MachineLearningRequest",
    "ModelSpec",
    "ModelTask",
    "ModelType",
]
