"""Configuration management for the Dispute Draft service."""

import os
from dataclasses import dataclass, field
from typing import List, Optional

from utils.errors import ConfigurationError


DEFAULT_STRIPE_API_VERSION = "2024-06-20"
DEFAULT_OPENAI_MODEL = "gpt-4o-mini"
DEFAULT_WORKER_THREADS = 64


def _optional(name: str) -> Optional[str]:
    value = os.getenv(name, "").strip()
    return value or None


@dataclass
class Settings:
    """
    Process configuration read from the environment.

    Only the Stripe secret key is needed to boot; the OAuth and webhook
    settings are checked by the endpoints that use them, and a missing
    OpenAI key switches draft generation to fallback text.
    """
    stripe_secret_key: str
    stripe_api_version: str = DEFAULT_STRIPE_API_VERSION
    stripe_client_id: Optional[str] = None
    stripe_redirect_uri: Optional[str] = None
    stripe_signing_secret: Optional[str] = None
    openai_api_key: Optional[str] = None
    openai_model: str = DEFAULT_OPENAI_MODEL
    api_host: str = "0.0.0.0"
    api_port: int = 3000
    cors_allow_origins: List[str] = field(default_factory=lambda: ["*"])
    worker_threads: int = DEFAULT_WORKER_THREADS

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Load settings from environment variables.

        Raises:
            ConfigurationError: If STRIPE_SECRET_KEY is not set
        """
        secret_key = _optional("STRIPE_SECRET_KEY")
        if not secret_key:
            raise ConfigurationError("STRIPE_SECRET_KEY")

        port = os.getenv("API_PORT") or os.getenv("PORT") or "3000"
        try:
            api_port = int(port)
        except ValueError:
            raise ConfigurationError("API_PORT", f"API_PORT must be an integer, got {port!r}")

        threads = os.getenv("WORKER_THREADS", str(DEFAULT_WORKER_THREADS))
        try:
            worker_threads = int(threads)
        except ValueError:
            worker_threads = 0
        if worker_threads < 1:
            raise ConfigurationError("WORKER_THREADS", f"WORKER_THREADS must be a positive integer, got {threads!r}")

        origins = os.getenv("CORS_ALLOW_ORIGINS", "*")

        return cls(
            stripe_secret_key=secret_key,
            stripe_api_version=os.getenv("STRIPE_API_VERSION", DEFAULT_STRIPE_API_VERSION),
            stripe_client_id=_optional("STRIPE_CLIENT_ID"),
            stripe_redirect_uri=_optional("STRIPE_REDIRECT_URI"),
            stripe_signing_secret=_optional("STRIPE_SIGNING_SECRET"),
            openai_api_key=_optional("OPENAI_API_KEY"),
            openai_model=os.getenv("OPENAI_MODEL", DEFAULT_OPENAI_MODEL),
            api_host=os.getenv("API_HOST", "0.0.0.0"),
            api_port=api_port,
            cors_allow_origins=[o.strip() for o in origins.split(",") if o.strip()],
            worker_threads=worker_threads,
        )
