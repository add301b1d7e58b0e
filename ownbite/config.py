from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, List


def _env_flag(name: str) -> bool:
    return (os.environ.get(name) or "").strip() in {"1", "true", "True"}


class Settings:
    """Centralized configuration for the OwnBite backend."""

    def __init__(self) -> None:
        base_dir = Path(__file__).resolve().parent
        repo_root = base_dir.parent
        data_root_default = repo_root / "data"

        self.data_root: Path = Path(
            os.environ.get("OWNBITE_DATA_ROOT") or data_root_default
        ).expanduser()
        self.app_db_path: Path = Path(
            os.environ.get("OWNBITE_DB_PATH") or (self.data_root / "ownbite.db")
        ).expanduser()
        # In production you MUST set OWNBITE_JWT_SECRET.
        self.jwt_secret: str = os.environ.get("OWNBITE_JWT_SECRET") or "dev-secret-change-me"
        self.token_ttl_days: int = int(os.environ.get("OWNBITE_TOKEN_TTL_DAYS") or "7")
        self.cookie_secure: bool = _env_flag("OWNBITE_COOKIE_SECURE")
        self.max_upload_mb: int = int(os.environ.get("OWNBITE_MAX_UPLOAD_MB") or "20")
        self.log_level: str = (os.environ.get("OWNBITE_LOG_LEVEL") or "INFO").upper()
        self.share_base_url: str = (
            os.environ.get("OWNBITE_SHARE_BASE_URL") or "https://ownbite.me"
        ).rstrip("/")

        # ---- Generative AI (Gemini, OpenAI-compatible endpoint) ----
        self.gemini_api_key: str | None = os.environ.get("GEMINI_API_KEY") or None
        self.gemini_base_url: str = os.environ.get(
            "GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta/openai"
        )
        self.gemini_model: str = os.environ.get("GEMINI_MODEL", "gemini-2.0-flash")
        self.gemini_vision_model: str = os.environ.get("GEMINI_VISION_MODEL", self.gemini_model)
        self.gemini_timeout: float = float(os.environ.get("GEMINI_TIMEOUT", "30"))
        self.gemini_max_tokens: int = int(os.environ.get("GEMINI_MAX_TOKENS", "4096"))
        self.gemini_temperature: float = float(os.environ.get("GEMINI_TEMPERATURE", "0.4"))
        self.meal_plan_timeout: float = float(os.environ.get("MEAL_PLAN_TIMEOUT", "25"))

        # ---- Food photo pre-processing ----
        self.image_max_edge: int = int(os.environ.get("IMAGE_MAX_EDGE", "1024"))
        self.image_jpeg_quality: int = int(os.environ.get("IMAGE_JPEG_QUALITY", "70"))

        # ---- Third-party APIs ----
        self.spoonacular_api_key: str | None = os.environ.get("SPOONACULAR_API_KEY") or None
        self.spoonacular_base_url: str = os.environ.get(
            "SPOONACULAR_BASE_URL", "https://api.spoonacular.com/recipes"
        )
        self.social_timeout: float = float(os.environ.get("SOCIAL_TIMEOUT", "10"))
        self.social_credentials: Dict[str, tuple[str | None, str | None]] = {
            "facebook": (os.environ.get("FACEBOOK_APP_ID"), os.environ.get("FACEBOOK_APP_SECRET")),
            "instagram": (os.environ.get("INSTAGRAM_APP_ID"), os.environ.get("INSTAGRAM_APP_SECRET")),
            "twitter": (os.environ.get("TWITTER_CLIENT_ID"), os.environ.get("TWITTER_CLIENT_SECRET")),
            "tiktok": (os.environ.get("TIKTOK_CLIENT_KEY"), os.environ.get("TIKTOK_CLIENT_SECRET")),
            "pinterest": (os.environ.get("PINTEREST_APP_ID"), os.environ.get("PINTEREST_APP_SECRET")),
        }

        cors = os.environ.get("OWNBITE_CORS_ORIGINS", "*")
        if cors.strip() == "*":
            self.cors_origins: List[str] = ["*"]
        else:
            self.cors_origins = [
                origin.strip() for origin in cors.split(",") if origin.strip()
            ]


settings = Settings()
