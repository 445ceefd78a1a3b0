"""Runtime configuration for the newsroom.

Settings come from environment variables, optionally loaded from a ``.env``
file in the working directory.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

from ai_newsroom.errors import ConfigurationError
from ai_newsroom.utils.newsroom_logging import parse_log_level

DEFAULT_MODEL = "openai:gpt-4o-mini"
DEFAULT_STORE_PATH = Path("data") / "news-store.json"
DEFAULT_REQUEST_DELAY = 2.0
DEFAULT_MODEL_TIMEOUT = 120.0


def _get_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}")
    if value < 0:
        raise ConfigurationError(f"{name} must not be negative, got {raw!r}")
    return value


def _get_str(env: Mapping[str, str], name: str) -> Optional[str]:
    value = env.get(name)
    if value is None or value.strip() == "":
        return None
    return value.strip()


@dataclass(frozen=True)
class NewsroomConfig:
    model: str = DEFAULT_MODEL
    model_base_url: Optional[str] = None
    model_api_key: Optional[str] = None
    model_timeout: float = DEFAULT_MODEL_TIMEOUT
    tavily_api_key: Optional[str] = None
    store_path: Path = DEFAULT_STORE_PATH
    request_delay: float = DEFAULT_REQUEST_DELAY
    log_level: int = logging.INFO

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None, load_dotenv_file: bool = True) -> "NewsroomConfig":
        """Build a config from the environment (``os.environ`` unless ``env`` is given)."""
        if env is None:
            if load_dotenv_file:
                load_dotenv()
            env = os.environ

        log_level_name = _get_str(env, "NEWSROOM_LOG_LEVEL") or "INFO"
        try:
            log_level = parse_log_level(log_level_name)
        except ValueError as e:
            raise ConfigurationError(str(e))

        store_path = _get_str(env, "NEWSROOM_STORE_PATH")

        return cls(
            model=_get_str(env, "NEWSROOM_MODEL") or DEFAULT_MODEL,
            model_base_url=_get_str(env, "NEWSROOM_MODEL_BASE_URL"),
            model_api_key=_get_str(env, "NEWSROOM_MODEL_API_KEY"),
            model_timeout=_get_float(env, "NEWSROOM_MODEL_TIMEOUT", DEFAULT_MODEL_TIMEOUT),
            tavily_api_key=_get_str(env, "TAVILY_API_KEY"),
            store_path=Path(store_path) if store_path else DEFAULT_STORE_PATH,
            request_delay=_get_float(env, "NEWSROOM_REQUEST_DELAY", DEFAULT_REQUEST_DELAY),
            log_level=log_level,
        )
