from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import List

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env from repo root if present
ENV_PATH = Path(__file__).resolve().parents[3] / ".env"
if ENV_PATH.exists():
    load_dotenv(dotenv_path=ENV_PATH)


class Settings(BaseSettings):
    """Global HubLab API settings (loaded from env).

    Generation:
      - "max_tree_*" bound the capsule walker so malformed or cyclic trees fail
        with a reported error instead of exhausting the stack.
      - "strict_targets" turns unknown target platforms into a 400 instead of
        silently skipping them.

    AI bridge:
      - "groq_*" configure the OpenAI-compatible completion endpoint used by
        /ai/generate and /ai/build.
    """

    # --- service ---
    service_name: str = Field(default="HubLab API", description="Service name")
    version: str = Field(default="1.0.0", description="Service version")
    environment: str = Field(default="dev", description="Environment name (dev/staging/prod)")
    host: str = Field(default="0.0.0.0", description="API bind host")
    port: int = Field(default=3001, description="API bind port")
    docs_url: str = Field(default="https://hublab.dev/docs", description="Public docs link")

    # Logging
    log_level: str = Field(default="INFO", description="Root log level")
    log_format: str = Field(default="text", description="text|json")

    # --- Groq (OpenAI-compatible chat completions) ---
    groq_api_key: str = Field(default="", description="Groq API key")
    groq_base_url: str = Field(
        default="https://api.groq.com/openai/v1",
        description="OpenAI-compatible base URL",
    )
    groq_model: str = Field(default="llama-3.3-70b-versatile", description="Completion model")
    groq_temperature: float = Field(default=0.7, ge=0.0, le=2.0, description="Sampling temperature")
    groq_max_tokens: int = Field(default=4000, description="Max completion tokens")
    groq_timeout_seconds: float = Field(
        default=60.0,
        description="Per-request timeout for the completion call",
    )
    # 1 keeps the single-shot behaviour: a failed call is surfaced, not retried
    groq_max_attempts: int = Field(default=1, ge=1, le=5, description="Completion call attempts")

    # --- Generation guards ---
    max_tree_depth: int = Field(default=64, ge=1, le=256, description="Deepest capsule nesting accepted")
    max_tree_nodes: int = Field(default=5000, ge=1, description="Most capsules accepted per screen")
    strict_targets: bool = Field(
        default=False,
        description="Reject unknown target platforms instead of skipping them",
    )

    # --- Generated code defaults ---
    default_android_package: str = Field(default="com.hublab.app", description="Fallback Android package")
    default_theme_primary: str = Field(default="#6366F1", description="Primary colour for AI projects without a theme")

    # --- CORS ---
    cors_allow_origins: List[str] = Field(default_factory=lambda: ["*"])
    cors_allow_methods: List[str] = Field(default_factory=lambda: ["*"])
    cors_allow_headers: List[str] = Field(default_factory=lambda: ["*"])

    # Request bodies above this size are rejected by the generate routes
    max_body_bytes: int = Field(default=10 * 1024 * 1024, description="Max JSON body size")

    # pydantic-settings v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ---- Convenience helpers ----
    @property
    def ai_configured(self) -> bool:
        """True when the AI bridge has a credential to call with."""
        return bool(self.groq_api_key.strip())


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
