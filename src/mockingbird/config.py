"""Configuration management for MockingBird."""

import logging
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

# Use tomllib on Python 3.11+, fall back to tomli for 3.10
if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

import tomli_w

from .client import DEFAULT_API_URL, DEFAULT_TIMEOUT
from .timer import DEFAULT_DURATION

logger = logging.getLogger(__name__)

BACKENDS = ("api", "llm")
DEFAULT_BACKEND = "api"


@dataclass
class ApiConfig:
    """Interviewer HTTP service settings."""

    url: str = DEFAULT_API_URL
    api_key: str | None = None  # Only read from MOCKINGBIRD_API_KEY, never saved
    timeout: int = DEFAULT_TIMEOUT


@dataclass
class LLMConfig:
    """Direct LLM backend settings.

    The model string encodes the provider using litellm conventions:
    - "openai/gpt-4o-mini" → OpenAI API
    - "anthropic/claude-3-5-haiku-20241022" → Anthropic API
    - "gemini/gemini-2.5-flash" → Google Gemini
    - "ollama/qwen2.5:7b" → Ollama
    """

    model: str = "gemini/gemini-2.5-flash"
    api_base: str | None = None  # For local providers or custom endpoints


@dataclass
class InterviewConfig:
    """Interview session settings."""

    duration_seconds: int = DEFAULT_DURATION
    chat_window: int = 4         # Chat messages visible at once
    code_height: int = 6         # Visible code editor lines
    chat_input_height: int = 3   # Visible chat input lines


@dataclass
class Config:
    """MockingBird configuration."""

    api: ApiConfig = field(default_factory=ApiConfig)
    llm: LLMConfig = field(default_factory=LLMConfig)
    interview: InterviewConfig = field(default_factory=InterviewConfig)
    backend: str = field(default=DEFAULT_BACKEND)  # "api" or "llm"
    debug_logging: bool = field(default=False)  # Enable debug logging to file (opt-in)


# Config file path
CONFIG_DIR = Path.home() / ".mockingbird"
CONFIG_FILE = CONFIG_DIR / "config.toml"


def _env_bool(name: str) -> bool | None:
    value = os.getenv(name)
    if value is None:
        return None
    return value.lower() in ("true", "1", "yes")


def _env_int(name: str) -> int | None:
    value = os.getenv(name)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        logger.warning(f"Ignoring {name}={value!r}: not an integer")
        return None


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    section = data.get(name, {})
    if not isinstance(section, dict):
        logger.warning(f"Ignoring [{name}] in {CONFIG_FILE}: not a table")
        return {}
    return section


def _file_positive_int(section: dict[str, Any], name: str, default: int) -> int:
    value = section.get(name.rsplit(".", 1)[-1], default)
    # bool is an int subclass, TOML true/false is not a count
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        logger.warning(f"Ignoring {name}={value!r} in {CONFIG_FILE}: not a positive integer")
        return default
    return value


def _file_str(section: dict[str, Any], name: str, default: str | None) -> str | None:
    value = section.get(name.rsplit(".", 1)[-1], default)
    if value is not None and not isinstance(value, str):
        logger.warning(f"Ignoring {name}={value!r} in {CONFIG_FILE}: not a string")
        return default
    return value


def load_config() -> Config:
    """Load configuration from environment, file, or defaults.

    Priority (highest to lowest):
    1. Environment variables (MOCKINGBIRD_*)
    2. Config file (~/.mockingbird/config.toml)
    3. Hardcoded defaults

    API keys for litellm providers are read from standard env vars
    (OPENAI_API_KEY, GEMINI_API_KEY, etc.) by litellm automatically.
    """
    config = Config()

    data: dict[str, Any] | None = None
    if CONFIG_FILE.exists():
        try:
            with open(CONFIG_FILE, "rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            logger.warning(f"Could not read {CONFIG_FILE}: {e}")

    if data is not None:
        api_data = _section(data, "api")
        config.api.url = _file_str(api_data, "api.url", config.api.url)
        config.api.timeout = _file_positive_int(api_data, "api.timeout", config.api.timeout)

        llm_data = _section(data, "llm")
        config.llm.model = _file_str(llm_data, "llm.model", config.llm.model)
        config.llm.api_base = _file_str(llm_data, "llm.api_base", config.llm.api_base)

        interview_data = _section(data, "interview")
        defaults = InterviewConfig()
        config.interview = InterviewConfig(
            duration_seconds=_file_positive_int(interview_data, "interview.duration_seconds", defaults.duration_seconds),
            chat_window=_file_positive_int(interview_data, "interview.chat_window", defaults.chat_window),
            code_height=_file_positive_int(interview_data, "interview.code_height", defaults.code_height),
            chat_input_height=_file_positive_int(interview_data, "interview.chat_input_height", defaults.chat_input_height),
        )

        config.backend = _file_str(data, "backend", config.backend)
        debug_logging = data.get("debug_logging", config.debug_logging)
        if isinstance(debug_logging, bool):
            config.debug_logging = debug_logging
        else:
            logger.warning(f"Ignoring debug_logging={debug_logging!r} in {CONFIG_FILE}: not true/false")

    # Environment variables override everything
    config.api.url = os.getenv("MOCKINGBIRD_API_URL", config.api.url)
    config.api.api_key = os.getenv("MOCKINGBIRD_API_KEY", config.api.api_key)
    config.llm.model = os.getenv("MOCKINGBIRD_LLM_MODEL", config.llm.model)
    config.llm.api_base = os.getenv("MOCKINGBIRD_LLM_API_BASE", config.llm.api_base)

    backend_env = os.getenv("MOCKINGBIRD_BACKEND")
    if backend_env is not None and backend_env in BACKENDS:
        config.backend = backend_env
    duration_env = _env_int("MOCKINGBIRD_DURATION")
    if duration_env is not None and duration_env > 0:
        config.interview.duration_seconds = duration_env
    debug_logging_env = _env_bool("MOCKINGBIRD_DEBUG_LOGGING")
    if debug_logging_env is not None:
        config.debug_logging = debug_logging_env

    if config.backend not in BACKENDS:
        logger.warning(f"Unknown backend {config.backend!r}, using {DEFAULT_BACKEND!r}")
        config.backend = DEFAULT_BACKEND

    return config


def save_config(config: Config) -> None:
    """Save configuration to file.

    Note: API keys are never saved to the config file.
    """
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)

    data: dict[str, Any] = {
        "backend": config.backend,
        "debug_logging": config.debug_logging,
        "api": {
            "url": config.api.url,
            "timeout": config.api.timeout,
        },
        "llm": {
            "model": config.llm.model,
        },
    }

    # Save api_base when set (for local/custom endpoints)
    if config.llm.api_base:
        data["llm"]["api_base"] = config.llm.api_base

    # Save interview config only if non-default
    if config.interview != InterviewConfig():
        data["interview"] = {
            "duration_seconds": config.interview.duration_seconds,
            "chat_window": config.interview.chat_window,
            "code_height": config.interview.code_height,
            "chat_input_height": config.interview.chat_input_height,
        }

    with open(CONFIG_FILE, "wb") as f:
        tomli_w.dump(data, f)
