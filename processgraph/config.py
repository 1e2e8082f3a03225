"""Settings and logging setup.

The core never reads the environment. Composition roots (the API server,
the scripts) build a Settings object once, usually via Settings.from_env(),
and pass it down explicitly.
"""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass, field
from typing import Mapping

from dotenv import load_dotenv

PROVIDERS = ("mock", "custom", "openrouter")

DEFAULT_OPENROUTER_URL = "https://openrouter.ai/api/v1/chat/completions"
DEFAULT_OPENROUTER_MODEL = "openai/gpt-4o-mini"


def _as_bool(value: str | None, default: bool) -> bool:
    if value is None or value == "":
        return default
    return value.strip().lower() not in ("0", "false", "no", "off")


@dataclass(frozen=True)
class GeneratorSettings:
    """Which text-to-graph provider to use and how to reach it."""

    provider: str = "mock"
    api_url: str | None = None
    api_key: str | None = None
    model: str = DEFAULT_OPENROUTER_MODEL
    referer: str | None = None
    title: str = "Prompt-to-BPMN"
    timeout: float = 30.0
    retries: int = 2
    backoff_seconds: float = 0.5

    def __post_init__(self) -> None:
        if self.provider not in PROVIDERS:
            raise ValueError(f"provider must be one of {PROVIDERS}, got {self.provider!r}")
        if self.retries < 0:
            raise ValueError("retries must not be negative")

    @property
    def use_mock(self) -> bool:
        return self.provider == "mock"


@dataclass(frozen=True)
class Settings:
    """Top-level application settings."""

    generator: GeneratorSettings = field(default_factory=GeneratorSettings)
    cors_origins: tuple[str, ...] = ("*",)
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> Settings:
        """Build settings from environment variables.

        When `env` is None, a .env file is loaded first (python-dotenv) and
        os.environ is used.
        """
        if env is None:
            load_dotenv()
            env = os.environ

        use_mock = _as_bool(env.get("PROCESSGRAPH_USE_MOCK"), True)
        provider = "mock" if use_mock else env.get("PROCESSGRAPH_LLM_PROVIDER", "custom").lower()
        api_url = env.get("PROCESSGRAPH_LLM_API_URL") or None
        if provider == "openrouter" and not api_url:
            api_url = DEFAULT_OPENROUTER_URL

        generator = GeneratorSettings(
            provider=provider,
            api_url=api_url,
            api_key=env.get("PROCESSGRAPH_LLM_API_KEY") or None,
            model=env.get("PROCESSGRAPH_OPENROUTER_MODEL") or DEFAULT_OPENROUTER_MODEL,
            referer=env.get("PROCESSGRAPH_OPENROUTER_REFERER") or None,
            title=env.get("PROCESSGRAPH_OPENROUTER_TITLE") or "Prompt-to-BPMN",
            timeout=float(env.get("PROCESSGRAPH_LLM_TIMEOUT") or 30.0),
        )
        origins = tuple(
            origin.strip()
            for origin in env.get("CORS_ORIGINS", "*").split(",")
            if origin.strip()
        )
        return cls(
            generator=generator,
            cors_origins=origins or ("*",),
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
        )


def configure_logging(level: str | int = "INFO") -> None:
    """Install a single stream handler on the root logger."""
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))
    root_logger.setLevel(level)
    root_logger.addHandler(handler)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
