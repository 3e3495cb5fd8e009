"""
Configuration management for ml-dispatch.
"""
import os
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # Inference servers, semicolon separated, tried in order
    machine_learning_url: str = os.getenv(
        "MACHINE_LEARNING_URL",
        "http://immich-machine-learning:3003"
    )

    # Timeouts (seconds)
    request_timeout: float = float(os.getenv("REQUEST_TIMEOUT", "120.0"))
    probe_timeout: float = float(os.getenv("PROBE_TIMEOUT", "5.0"))

    # Liveness probe path appended to each candidate; empty probes the root
    health_path: str = os.getenv("HEALTH_PATH", "")

    # Facial Recognition
    facial_recognition_model: str = os.getenv("FACIAL_RECOGNITION_MODEL", "buffalo_l")
    face_min_score: float = float(os.getenv("FACE_MIN_SCORE", "0.7"))

    # CLIP (smart search)
    clip_model: str = os.getenv("CLIP_MODEL", "ViT-B-32__openai")

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    class Config:
        env_file = ".env"
        case_sensitive = False


# Global settings instance
settings = Settings()
