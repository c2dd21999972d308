"""
KreolSafe Configuration

Central settings loaded from environment variables.
"""

import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    """Immutable application settings."""

    # --- Versioning ---
    ENGINE_VERSION: str = "0.3.0"

    # --- Oracle (LLM) ---
    LLM_PROVIDER: str = os.getenv("KREOLSAFE_LLM_PROVIDER", "gemini")
    GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
    GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
    ORACLE_TIMEOUT_S: float = float(os.getenv("KREOLSAFE_ORACLE_TIMEOUT", "20"))

    # --- Input bounds ---
    MAX_TEXT_CHARS: int = int(os.getenv("KREOLSAFE_MAX_TEXT_CHARS", "8000"))
    MAX_HINTS: int = int(os.getenv("KREOLSAFE_MAX_HINTS", "24"))
    FALLBACK_HINTS: int = int(os.getenv("KREOLSAFE_FALLBACK_HINTS", "3"))

    # --- Normalizer ---
    REPEAT_MAX: int = max(1, int(os.getenv("KREOLSAFE_REPEAT_MAX", "2")))
    FOLD_DIACRITICS: bool = _env_bool("KREOLSAFE_FOLD_DIACRITICS", "true")
    LOWERCASE: bool = _env_bool("KREOLSAFE_LOWERCASE", "true")

    # --- Pattern matcher ---
    STEREOTYPE_KIND: str = os.getenv("KREOLSAFE_STEREOTYPE_KIND", "bias")


settings = Settings()
