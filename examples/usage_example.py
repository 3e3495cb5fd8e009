"""
Example usage of the ml-dispatch client.

Start a server first, e.g. `python scripts/mock_ml_server.py`, then run
`python examples/usage_example.py path/to/photo.jpg`.
"""
import asyncio
import sys
from pathlib import Path

from ml_dispatch.core.config import settings
from ml_dispatch.core.logging import setup_logging
from ml_dispatch.model_client import (
    CLIPConfig,
    FaceDetectionOptions,
    MachineLearningClient,
    MachineLearningError,
    NoAvailableServer,
)

# The first address is expected to be down; the client falls back to the second
SERVERS = "http://localhost:3013; http://localhost:3003"


# Example 1: Face detection
async def example_faces(client: MachineLearningClient, image_path: str):
    print("=" * 60)
    print("Example 1: Face Detection")
    print("=" * 60)

    result = await client.detect_faces(
        SERVERS,
        image_path,
        FaceDetectionOptions(model_name="buffalo_l", min_score=0.7),
    )
    print(f"Image: {result.image_width}x{result.image_height}")
    for face in result.faces:
        box = face.bounding_box
        print(f"  face score={face.score:.2f} box=({box.x1:.0f}, {box.y1:.0f}, {box.x2:.0f}, {box.y2:.0f})")


# Example 2: Image and text embeddings
async def example_clip(client: MachineLearningClient, image_path: str):
    print("=" * 60)
    print("Example 2: CLIP Embeddings")
    print("=" * 60)

    config = CLIPConfig(model_name="ViT-B-32__openai")
    image_embedding = await client.encode_image(SERVERS, image_path, config)
    text_embedding = await client.encode_text(SERVERS, "a dog on the beach", config)

    image_vec = image_embedding.to_numpy()
    text_vec = text_embedding.to_numpy()
    print(f"Image embedding: {image_vec.shape[0]} dims")
    print(f"Text embedding: {text_vec.shape[0]} dims")
    print(f"Dot product: {float(image_vec @ text_vec):.4f}")


# Example 3: No server reachable
async def example_unreachable(client: MachineLearningClient):
    print("=" * 60)
    print("Example 3: No Reachable Server")
    print("=" * 60)

    try:
        await client.encode_text("http://localhost:3999", "hello world")
    except NoAvailableServer as e:
        print(f"Expected failure: {e}")


async def main(image_path: str):
    setup_logging(settings.log_level)

    async with MachineLearningClient() as client:
        try:
            await example_faces(client, image_path)
            await example_clip(client, image_path)
            await example_unreachable(client)
        except MachineLearningError as e:
            print(f"Request failed: {e}")


if __name__ == "__main__":
    if len(sys.argv) != 2 or not Path(sys.argv[1]).exists():
        print("Usage: python examples/usage_example.py <image>")
        sys.exit(1)
    asyncio.run(main(sys.argv[1]))
