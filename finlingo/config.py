"""Global configuration singleton for finlingo.

Reads API keys and tunables from environment variables by default.  When
embedded (e.g. from the NiceGUI sample host), the caller can populate the
singleton *before* the first request so that keys don't have to live in the
process environment.

    from finlingo.config import settings
    settings.GEMINI_API_KEY = "AIza..."
    settings.DOM_SWEEP_BATCH_LIMIT = 20
"""

import os
from pathlib import Path
from typing import Optional

PROJ_ROOT = Path(__file__).resolve().parent.parent
STATIC_DIR = PROJ_ROOT / "static"


class Settings:
    """Lightweight mutable config — one global instance."""

    GEMINI_API_KEY: Optional[str] = None
    GEMINI_API_KEY_2: Optional[str] = None
    GEMINI_API_KEY_3: Optional[str] = None
    GOOGLE_API_KEY: Optional[str] = None
    GEMINI_MODEL: Optional[str] = None

    DEFAULT_LOCALE: Optional[str] = None
    MESSAGES_DIR: Optional[str] = None
    GENERATED_DIR: Optional[str] = None

    DOM_SWEEP_BATCH_LIMIT: Optional[int] = None
    DOM_SWEEP_MAX_TEXT_LENGTH: Optional[int] = None
    TRANSLATE_TIMEOUT: Optional[float] = None
    ENDPOINT_BASE_URL: Optional[str] = None

    def get(self, name: str) -> Optional[str]:
        """Return the attribute value if set, otherwise fall back to env."""
        value = getattr(self, name, None)
        if value is not None:
            return value if isinstance(value, str) else str(value)
        return os.getenv(name)

    def get_int(self, name: str, default: int) -> int:
        value = self.get(name)
        return int(value) if value else default

    def get_float(self, name: str, default: float) -> float:
        value = self.get(name)
        return float(value) if value else default

    @property
    def default_locale(self) -> str:
        return self.get("DEFAULT_LOCALE") or "en"

    @property
    def messages_dir(self) -> Path:
        return Path(self.get("MESSAGES_DIR") or STATIC_DIR / "messages")

    @property
    def generated_dir(self) -> Path:
        return Path(self.get("GENERATED_DIR") or self.messages_dir / "generated")

    def gemini_api_keys(self) -> list[str]:
        """All configured Gemini keys, in rotation order."""
        names = ("GEMINI_API_KEY", "GEMINI_API_KEY_2", "GEMINI_API_KEY_3", "GOOGLE_API_KEY")
        keys: list[str] = []
        for name in names:
            key = self.get(name)
            if key and key not in keys:
                keys.append(key)
        return keys


settings = Settings()
