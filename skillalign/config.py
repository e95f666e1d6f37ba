"""Runtime configuration loaded from environment variables.

Static catalogs (domains, roles, quiz banks, actions) live as JSON under
``data/``; only deployment knobs are read from the environment.
"""

from __future__ import annotations

import os
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parents[1]

DEFAULT_AI_URL = "https://api.groq.com/openai/v1/chat/completions"
DEFAULT_AI_MODELS = (
    "llama-3.3-70b-versatile",
    "llama-3.1-70b-versatile",
    "llama3-70b-8192",
    "mixtral-8x7b-32768",
)


class Settings:
    def __init__(self):
        self.data_dir: Path = Path(os.getenv("SKILLALIGN_DATA_DIR", str(ROOT_DIR / "data")))
        self.match_policy: str = os.getenv("SKILLALIGN_MATCH_POLICY", "word").strip().lower()

        # AI role analysis (OpenAI-compatible chat endpoint)
        self.ai_api_key: str | None = os.getenv("GROQ_API_KEY") or None
        self.ai_base_url: str = os.getenv("SKILLALIGN_AI_URL", DEFAULT_AI_URL)
        models = os.getenv("SKILLALIGN_AI_MODELS", "")
        self.ai_models: list[str] = [m.strip() for m in models.split(",") if m.strip()] or list(DEFAULT_AI_MODELS)
        self.ai_timeout: float = float(os.getenv("SKILLALIGN_AI_TIMEOUT", "30"))

        self.log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()


settings = Settings()
