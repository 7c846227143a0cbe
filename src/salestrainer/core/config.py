"""Environment-driven application settings."""

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    """Runtime configuration for the trainer service.

    Every value comes from an environment variable so the same image can run
    locally against SQLite and in production against PostgreSQL.
    """

    openai_api_key: str | None
    chat_model: str = "gpt-4o-mini"
    tts_model: str = "gpt-4o-mini-tts"
    tts_voice: str = "alloy"
    transcribe_model: str = "gpt-4o-mini-transcribe"
    llm_timeout_seconds: float = 60.0
    tts_enabled: bool = True
    # 0 means the whole message log is sent on every turn
    context_max_messages: int = 0
    catalog_sample_size: int = 12
    session_list_limit: int = 50
    data_dir: Path = Path("data")
    audio_dir: Path = Path("data/audio")
    static_dir: Path = Path("public")
    environment: str = "development"

    @property
    def catalog_seed_path(self) -> Path:
        """Location of the products.json mirror of the catalog snapshot."""
        return self.data_dir / "products.json"


def load_settings() -> Settings:
    """Build a Settings object from the current environment."""
    data_dir = Path(os.getenv("DATA_DIR", "data"))
    audio_dir = Path(os.getenv("AUDIO_DIR", str(data_dir / "audio")))

    return Settings(
        openai_api_key=os.getenv("OPENAI_API_KEY") or None,
        chat_model=os.getenv("CHAT_MODEL", "gpt-4o-mini"),
        tts_model=os.getenv("TTS_MODEL", "gpt-4o-mini-tts"),
        tts_voice=os.getenv("TTS_VOICE", "alloy"),
        transcribe_model=os.getenv("TRANSCRIBE_MODEL", "gpt-4o-mini-transcribe"),
        llm_timeout_seconds=float(_env_int("LLM_TIMEOUT_SECONDS", 60)),
        tts_enabled=_env_bool("TTS_ENABLED", True),
        context_max_messages=max(0, _env_int("CONTEXT_MAX_MESSAGES", 0)),
        catalog_sample_size=max(1, _env_int("CATALOG_SAMPLE_SIZE", 12)),
        session_list_limit=max(1, _env_int("SESSION_LIST_LIMIT", 50)),
        data_dir=data_dir,
        audio_dir=audio_dir,
        static_dir=Path(os.getenv("STATIC_DIR", "public")),
        environment=os.getenv("ENVIRONMENT", "development"),
    )


@lru_cache
def get_settings() -> Settings:
    """Process settings, loaded once from the environment."""
    return load_settings()
