"""Project-level configuration and path helpers."""

import os
from dataclasses import dataclass, field
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
LOGS_DIR = PROJECT_ROOT / "logs"
DEFAULT_LOG_PATH = LOGS_DIR / "app.log"

# GitHub Models inference endpoint (OpenAI-compatible)
INFERENCE_BASE_URL = "https://models.github.ai/inference"
DEFAULT_MODEL = "openai/gpt-4o"
DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 1500

TOKEN_ENV_VAR = "GITHUB_TOKEN"


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_list(name: str, default: list[str]) -> list[str]:
    value = os.getenv(name)
    if not value:
        return list(default)
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass
class Settings:
    """Runtime settings read from the environment."""

    stream_api_key: str | None = None
    stream_api_secret: str | None = None
    github_token: str | None = None
    api_host: str = "localhost"
    api_port: int = 8000
    agent_idle_timeout: float = 300.0
    agent_sweep_interval: float = 60.0
    verify_webhooks: bool = True
    cors_origins: list[str] = field(
        default_factory=lambda: ["http://localhost:5173", "http://localhost:3000"]
    )

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables."""
        defaults = cls()
        return cls(
            stream_api_key=os.getenv("STREAM_API_KEY"),
            stream_api_secret=os.getenv("STREAM_API_SECRET"),
            github_token=os.getenv(TOKEN_ENV_VAR),
            api_host=os.getenv("API_HOST", defaults.api_host),
            api_port=int(os.getenv("API_PORT", str(defaults.api_port))),
            agent_idle_timeout=float(
                os.getenv("AGENT_IDLE_TIMEOUT", str(defaults.agent_idle_timeout))
            ),
            agent_sweep_interval=float(
                os.getenv("AGENT_SWEEP_INTERVAL", str(defaults.agent_sweep_interval))
            ),
            verify_webhooks=_env_bool("VERIFY_WEBHOOKS", defaults.verify_webhooks),
            cors_origins=_env_list("CORS_ORIGINS", defaults.cors_origins),
        )
