"""
HTTP Client for machine learning servers.
Provides async methods for face detection and CLIP embeddings.
"""
import logging
from typing import Optional, Sequence, Type, TypeVar, Union

import httpx
from pydantic import BaseModel

from ml_dispatch.core.config import Settings, settings as default_settings
from ml_dispatch.core.logging import get_logger
from ml_dispatch.model_client.errors import (
    DispatchFailed,
    MalformedResponse,
    PredictionRejected,
)
from ml_dispatch.model_client.payload import (
    ImagePayload,
    ModelPayload,
    TextPayload,
    build_form,
)
from ml_dispatch.model_client.resolver import EndpointResolver
from ml_dispatch.model_client.schemas import (
    CLIPConfig,
    ClipEmbedding,
    ClipTextualResponse,
    ClipVisualResponse,
    FaceDetectionOptions,
    FaceDetectionResult,
    FacialRecognitionResponse,
    MachineLearningRequest,
    ModelSpec,
    ModelTask,
    ModelType,
)

ResponseT = TypeVar("ResponseT", bound=BaseModel)

# Singleton instance
_client: Optional["MachineLearningClient"] = None


class MachineLearningClient:
    """
    HTTP client for machine learning servers.

    Every call probes the configured servers, sends one prediction to the
    first live one and validates the answer.

    Usage:
        client = MachineLearningClient()
        faces = await client.detect_faces(
            "http://ml-1:3003;http://ml-2:3003",
            "/photos/img.jpg",
            FaceDetectionOptions(model_name="buffalo_l", min_score=0.7),
        )
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        logger: Optional[logging.Logger] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[float] = None,
        resolver: Optional[EndpointResolver] = None,
    ):
        """
        Initialize the machine learning client.

        Args:
            settings: Settings to read defaults from (default global settings)
            logger: Logger to report to (default ml_dispatch.model_client)
            transport: Optional httpx transport, e.g. a MockTransport in tests
            timeout: Prediction timeout in seconds (default from settings)
            resolver: Endpoint resolver (default built from settings)
        """
        self.settings = settings or default_settings
        self.logger = logger or get_logger("model_client")
        self.timeout = timeout if timeout is not None else self.settings.request_timeout
        self.resolver = resolver or EndpointResolver(
            probe_timeout=self.settings.probe_timeout,
            health_path=self.settings.health_path,
            logger=self.logger.getChild("resolver"),
        )
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create async HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                transport=self._transport,
            )
        return self._client

    async def close(self):
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "MachineLearningClient":
        return self

    async def __aexit__(self, *exc_info):
        await self.close()

    # =========================================================================
    # Dispatch
    # =========================================================================

    async def predict(
        self,
        url: Union[str, Sequence[str]],
        payload: ModelPayload,
        request: MachineLearningRequest,
        response_model: Type[ResponseT],
    ) -> ResponseT:
        """
        Send one prediction to the first live server.

        Args:
            url: `;` separated server addresses, or a sequence of them
            payload: Image or text payload
            request: Task/model configuration
            response_model: Schema the response body is validated against

        Returns:
            The validated response

        Raises:
            InvalidInput: Payload is neither image nor text (no network call made)
            NoAvailableServer: No server passed its liveness probe
            DispatchFailed: The POST failed at the transport level
            PredictionRejected: The server answered with status >= 400
            MalformedResponse: The body did not match response_model
        """
        form = await build_form(payload, request)

        client = await self._get_client()
        self.logger.debug(f"Predicting with {url}")
        working_url = await self.resolver.resolve(client, url)
        predict_url = str(httpx.URL(working_url).join("/predict"))

        try:
            response = await client.post(predict_url, files=form)
        except httpx.RequestError as e:
            raise DispatchFailed(working_url, e) from e

        if response.status_code >= 400:
            raise PredictionRejected(request.to_json(), response.status_code, response.reason_phrase)

        try:
            result = response_model.model_validate(response.json())
        except ValueError as e:
            # JSONDecodeError, UnicodeDecodeError and ValidationError
            raise MalformedResponse(working_url, e) from e

        self.logger.debug(f"Prediction from {working_url}: status {response.status_code}")
        return result

    # =========================================================================
    # Facial Recognition
    # =========================================================================

    async def detect_faces(
        self,
        url: str,
        image_path: str,
        options: Optional[FaceDetectionOptions] = None,
    ) -> FaceDetectionResult:
        """
        Detect faces and compute their recognition embeddings.

        Args:
            url: `;` separated server addresses
            image_path: Path of the image on disk
            options: Model name and minimum score (default from settings)

        Returns:
            Image dimensions and the detected faces
        """
        options = options or FaceDetectionOptions.from_settings(self.settings)
        request = MachineLearningRequest({
            ModelTask.FACIAL_RECOGNITION: {
                ModelType.DETECTION: ModelSpec(
                    model_name=options.model_name,
                    options={"minScore": options.min_score},
                ),
                ModelType.RECOGNITION: ModelSpec(model_name=options.model_name),
            },
        })
        response = await self.predict(url, ImagePayload(image_path), request, FacialRecognitionResponse)

        return FaceDetectionResult(
            image_height=response.image_height,
            image_width=response.image_width,
            faces=response.faces,
        )

    # =========================================================================
    # CLIP
    # =========================================================================

    async def encode_image(
        self,
        url: str,
        image_path: str,
        config: Optional[CLIPConfig] = None,
    ) -> ClipEmbedding:
        """Compute the CLIP embedding of an image."""
        config = config or CLIPConfig.from_settings(self.settings)
        request = MachineLearningRequest({
            ModelTask.SEARCH: {ModelType.VISUAL: ModelSpec(model_name=config.model_name)},
        })
        response = await self.predict(url, ImagePayload(image_path), request, ClipVisualResponse)
        return response.search

    async def encode_text(
        self,
        url: str,
        text: str,
        config: Optional[CLIPConfig] = None,
    ) -> ClipEmbedding:
        """Compute the CLIP embedding of a search query."""
        config = config or CLIPConfig.from_settings(self.settings)
        request = MachineLearningRequest({
            ModelTask.SEARCH: {ModelType.TEXTUAL: ModelSpec(model_name=config.model_name)},
        })
        response = await self.predict(url, TextPayload(text), request, ClipTextualResponse)
        return response.search


def get_machine_learning_client() -> MachineLearningClient:
    """Get singleton machine learning client instance."""
    global _client
    if _client is None:
        _client = MachineLearningClient()
    return _client
