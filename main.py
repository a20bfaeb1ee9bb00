"""Main entry point for the chat AI bridge."""

from pathlib import Path

import uvicorn
from dotenv import load_dotenv

from chat_ai_bridge.api import create_fastapi_app
from chat_ai_bridge.app import Application
from chat_ai_bridge.config import Settings
from chat_ai_bridge.logging_config import setup_logging


def main():
    """Run the service."""
    project_root = Path(__file__).resolve().parent
    load_dotenv(project_root / ".env")
    setup_logging()

    settings = Settings.from_env()
    app = create_fastapi_app(Application(settings))

    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_config=None,  # keep our JSON handlers
    )


if __name__ == "__main__":
    main()
