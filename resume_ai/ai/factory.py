from resume_ai.ai.config import load_ai_config
from resume_ai.ai.types import AIClient

from resume_ai.ai.providers.gemini_provider import from_config


def get_ai_client() -> AIClient:
    cfg = load_ai_config()

    if cfg.provider == "gemini":
        return from_config(cfg)

    raise ValueError(f"Unsupported AI_PROVIDER='{cfg.provider}'")
