"""Runtime settings read from the environment.

| Variable                    | Default                   |
|-----------------------------|---------------------------|
| ``ALUMOD_HOME``             | ``~/.alumod``             |
| ``ALUMOD_CLASSIFIER``       | ``ollama``                |
| ``OLLAMA_BASE_URL``         | ``http://localhost:11434``|
| ``ALUMOD_OLLAMA_MODEL``     | ``llama3.2:3b``           |
| ``ANTHROPIC_API_KEY``       | unset                     |
| ``ALUMOD_ANTHROPIC_MODEL``  | ``claude-sonnet-4-5-20250929`` |
| ``ALUMOD_CLASSIFIER_TIMEOUT`` | ``15``                  |
| ``ALUMOD_LOG_LEVEL``        | ``WARNING``               |
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

CLASSIFIER_BACKENDS = ("ollama", "anthropic")

DEFAULT_OLLAMA_URL = "http://localhost:11434"
DEFAULT_OLLAMA_MODEL = "llama3.2:3b"
DEFAULT_ANTHROPIC_MODEL = "claude-sonnet-4-5-20250929"
DEFAULT_TIMEOUT = 15.0


def _default_home() -> Path:
    return Path.home() / ".alumod"


@dataclass(frozen=True)
class Settings:
    """Immutable configuration snapshot."""

    home: Path = field(default_factory=_default_home)
    classifier_backend: str = "ollama"
    ollama_base_url: str = DEFAULT_OLLAMA_URL
    ollama_model: str = DEFAULT_OLLAMA_MODEL
    anthropic_api_key: str = ""
    anthropic_model: str = DEFAULT_ANTHROPIC_MODEL
    classifier_timeout: float = DEFAULT_TIMEOUT
    log_level: str = "WARNING"

    @property
    def moderation_dir(self) -> Path:
        """Directory holding the engine's JSON documents."""
        return self.home / "moderation"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ

        backend = env.get("ALUMOD_CLASSIFIER", "ollama").strip().lower()
        if backend not in CLASSIFIER_BACKENDS:
            logger.warning("Unknown ALUMOD_CLASSIFIER %r; using 'ollama'", backend)
            backend = "ollama"

        raw_timeout = env.get("ALUMOD_CLASSIFIER_TIMEOUT", "")
        timeout = DEFAULT_TIMEOUT
        if raw_timeout:
            try:
                timeout = float(raw_timeout)
            except ValueError:
                logger.warning("Invalid ALUMOD_CLASSIFIER_TIMEOUT %r; using %s", raw_timeout, timeout)
            else:
                if timeout <= 0:
                    logger.warning("ALUMOD_CLASSIFIER_TIMEOUT must be positive; using %s", DEFAULT_TIMEOUT)
                    timeout = DEFAULT_TIMEOUT

        home = env.get("ALUMOD_HOME")
        return cls(
            home=Path(home).expanduser() if home else _default_home(),
            classifier_backend=backend,
            ollama_base_url=env.get("OLLAMA_BASE_URL", DEFAULT_OLLAMA_URL),
            ollama_model=env.get("ALUMOD_OLLAMA_MODEL", DEFAULT_OLLAMA_MODEL),
            anthropic_api_key=env.get("ANTHROPIC_API_KEY", ""),
            anthropic_model=env.get("ALUMOD_ANTHROPIC_MODEL", DEFAULT_ANTHROPIC_MODEL),
            classifier_timeout=timeout,
            log_level=env.get("ALUMOD_LOG_LEVEL", "WARNING").upper(),
        )
