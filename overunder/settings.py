"""Application settings, loaded from config/config.yaml with env overrides."""

import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import BaseModel

from overunder.utils.config import Config


_PROJECT_ROOT = Path(__file__).parent.parent


class LLMConfig(BaseModel):
    api_key: str = ""
    base_url: str = "https://api.openai.com/v1"
    model: str = "gpt-4o-mini"
    temperature: Optional[float] = 0.4
    max_tokens: int = 4000


class StorageConfig(BaseModel):
    # "memory" | "json" | "sqlite"
    backend: str = "json"
    path: str = "data/overunder.json"
    user_key: str = "overunder_user"
    sessions_key: str = "overunder_sessions"


class LoggingConfig(BaseModel):
    level: str = "INFO"
    file: str = "logs/overunder.log"
    rotation: str = "10 MB"
    retention: str = "30 days"


class Settings(BaseModel):
    project_root: Path = _PROJECT_ROOT
    llm: LLMConfig = LLMConfig()
    storage: StorageConfig = StorageConfig()
    logging: LoggingConfig = LoggingConfig()
    debug: bool = False


def _resolve(path: str) -> Path:
    """Relative paths resolve against the project root."""
    path = Path(path)
    if path.is_absolute():
        return path
    return (_PROJECT_ROOT / path).resolve()


def load_settings(config_path: Optional[Path] = None) -> Settings:
    """Build settings from a YAML file (if it exists) and environment variables."""
    config_path = config_path or _PROJECT_ROOT / "config" / "config.yaml"
    llm_cfg: dict = {}
    storage_cfg: dict = {}
    logging_cfg: dict = {}

    if Path(config_path).exists():
        config = Config(str(config_path))
        llm_cfg = config.section("llm")
        storage_cfg = config.section("storage")
        logging_cfg = config.section("logging")

    # LLM credentials (yaml, env overrides)
    api_key = os.environ.get("OPENAI_API_KEY", llm_cfg.get("api_key", ""))
    base_url = os.environ.get(
        "OPENAI_BASE_URL", llm_cfg.get("base_url", "https://api.openai.com/v1")
    )
    model = os.environ.get(
        "OVERUNDER_MODEL", llm_cfg.get("model", "gpt-4o-mini")
    )

    store_path = _resolve(storage_cfg.get("path", "data/overunder.json"))
    log_path = _resolve(logging_cfg.get("file", "logs/overunder.log"))

    return Settings(
        llm=LLMConfig(
            api_key=api_key,
            base_url=base_url,
            model=model,
            temperature=llm_cfg.get("temperature", 0.4),
            max_tokens=llm_cfg.get("max_tokens", 4000),
        ),
        storage=StorageConfig(
            backend=storage_cfg.get("backend", "json"),
            path=str(store_path),
            user_key=storage_cfg.get("user_key", "overunder_user"),
            sessions_key=storage_cfg.get("sessions_key", "overunder_sessions"),
        ),
        logging=LoggingConfig(
            level=logging_cfg.get("level", "INFO"),
            file=str(log_path),
            rotation=logging_cfg.get("rotation", "10 MB"),
            retention=logging_cfg.get("retention", "30 days"),
        ),
        debug=os.environ.get("DEBUG", "").lower() in ("1", "true"),
    )


@lru_cache
def get_settings() -> Settings:
    """Load settings from config/config.yaml (if exists) + environment variables."""
    return load_settings()
