#!/usr/bin/env python3
"""
Mock machine learning server for trying out ml-dispatch locally.

This simple service simulates the inference server that:
- Answers liveness probes on GET /
- Accepts multipart predictions on POST /predict
- Returns canned facial recognition results and deterministic CLIP embeddings

Run with: python scripts/mock_ml_server.py
Runs on: http://localhost:3003 (override with MOCK_ML_PORT)
"""
import hashlib
import io
import json
import os
from typing import Any, Dict, List, Optional

import uvicorn
from fastapi import FastAPI, File, Form, HTTPException, UploadFile
from PIL import Image, UnidentifiedImageError

EMBEDDING_SIZE = 512

app = FastAPI(
    title="Mock Machine Learning Server",
    description="Test endpoint for ml-dispatch",
    version="1.0.0"
)


# ============= Mock Inference Logic =============

def fake_embedding(data: bytes, size: int = EMBEDDING_SIZE) -> List[float]:
    """Deterministic unit-range vector derived from the input bytes."""
    values: List[float] = []
    counter = 0
    while len(values) < size:
        digest = hashlib.sha256(data + counter.to_bytes(4, "big")).digest()
        values.extend(round(b / 255.0, 6) for b in digest)
        counter += 1
    return values[:size]


def fake_faces(image_bytes: bytes, width: int, height: int, min_score: float) -> List[Dict[str, Any]]:
    """One face in the middle of the image, scored above the threshold."""
    score = max(min_score, 0.9)
    return [{
        "boundingBox": {
            "x1": width * 0.25,
            "y1": height * 0.25,
            "x2": width * 0.75,
            "y2": height * 0.75,
        },
        "embedding": fake_embedding(image_bytes),
        "score": score,
    }]


def run_entries(entries: Dict[str, Any], image_bytes: Optional[bytes], text: Optional[str]) -> Dict[str, Any]:
    """Answer every requested task the way the real server shapes its response."""
    response: Dict[str, Any] = {}
    width = height = 0

    if image_bytes is not None:
        try:
            with Image.open(io.BytesIO(image_bytes)) as image:
                width, height = image.size
        except UnidentifiedImageError:
            raise HTTPException(status_code=422, detail="Image could not be decoded")
        response["imageHeight"] = height
        response["imageWidth"] = width

    for task, models in entries.items():
        if task == "facial-recognition":
            if image_bytes is None:
                raise HTTPException(status_code=400, detail="Facial recognition requires an image")
            detection = models.get("detection", {})
            min_score = detection.get("options", {}).get("minScore", 0.7)
            response[task] = fake_faces(image_bytes, width, height, min_score)
        elif task == "clip":
            if "visual" in models and image_bytes is not None:
                response[task] = fake_embedding(image_bytes)
            elif "textual" in models and text is not None:
                response[task] = fake_embedding(text.encode("utf-8"))
            else:
                raise HTTPException(status_code=400, detail="CLIP model type does not match input")
        else:
            raise HTTPException(status_code=422, detail=f"Unknown task '{task}'")

    return response


# ============= Endpoints =============

@app.get("/")
async def root():
    """Liveness probe."""
    return {"message": "Mock ML"}


@app.get("/ping")
async def ping():
    """Health check endpoint."""
    return "pong"


@app.post("/predict")
async def predict(
    entries: str = Form(...),
    image: Optional[UploadFile] = File(None),
    text: Optional[str] = Form(None),
):
    """Run the requested tasks on an image or a text."""
    try:
        parsed = json.loads(entries)
    except json.JSONDecodeError:
        raise HTTPException(status_code=422, detail="Invalid request format")

    if image is None and text is None:
        raise HTTPException(status_code=400, detail="Either image or text must be provided")

    image_bytes = await image.read() if image is not None else None
    return run_entries(parsed, image_bytes, text)


if __name__ == "__main__":
    port = int(os.getenv("MOCK_ML_PORT", "3003"))
    print("\n" + "="*60)
    print("  Mock Machine Learning Server")
    print("="*60)
    print("\nEndpoints:")
    print("  GET  /         - Liveness probe")
    print("  POST /predict  - Multipart prediction")
    print(f"\nStarting server on http://localhost:{port} ...")
    print("="*60 + "\n")

    uvicorn.run(app, host="0.0.0.0", port=port, log_level="info")
