"""Application configuration loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path


def _load_env_file(path: str = ".env") -> None:
    """Populate os.environ from the provided .env file if it exists."""

    env_path = Path(path)
    if not env_path.exists():
        return

    for line in env_path.read_text(encoding="utf-8").splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#") or "=" not in stripped:
            continue
        key, value = stripped.split("=", 1)
        os.environ.setdefault(key.strip(), value.strip())


@dataclass(frozen=True, slots=True)
class Settings:
    """Centralised project settings based on OS environment variables."""

    log_level: str = "INFO"

    aitunnel_api_key: str = ""
    aitunnel_base_url: str = "https://api.aitunnel.ru/v1"
    request_timeout: float = 60.0

    vision_model: str = "gemini-2.5-flash"
    recipe_model: str = "gemini-2.5-flash"
    image_model: str = "gemini-2.5-flash-image"
    vision_temperature: float = 0.1
    recipe_temperature: float = 0.75
    recipe_count: int = 3

    state_root: str = "storage/state"
    camera_index: int = 0


def _build_settings() -> Settings:
    _load_env_file()

    return Settings(
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        aitunnel_api_key=os.getenv("AITUNNEL_API_KEY", ""),
        aitunnel_base_url=os.getenv("AITUNNEL_BASE_URL", "https://api.aitunnel.ru/v1"),
        request_timeout=float(os.getenv("FRIDGEFORGE_REQUEST_TIMEOUT", "60")),
        vision_model=os.getenv("FRIDGEFORGE_VISION_MODEL", "gemini-2.5-flash"),
        recipe_model=os.getenv("FRIDGEFORGE_RECIPE_MODEL", "gemini-2.5-flash"),
        image_model=os.getenv("FRIDGEFORGE_IMAGE_MODEL", "gemini-2.5-flash-image"),
        state_root=os.getenv("FRIDGEFORGE_STATE_ROOT", "storage/state"),
        camera_index=int(os.getenv("FRIDGEFORGE_CAMERA_INDEX", "0")),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance to avoid re-reading configuration."""

    return _build_settings()
