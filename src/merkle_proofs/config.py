"""
Runtime Configuration

Settings for the service layer, the REST API and the CLI, read from the
environment (and a local .env file when present).
"""

import os
import logging
from dataclasses import dataclass
from typing import Optional, Tuple
from dotenv import load_dotenv

from .constants import NodeEncoding, DEFAULT_NODE_ENCODING, DEFAULT_MAX_LEAVES

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


@dataclass(frozen=True)
class Settings:
    """
    Service settings.

    Attributes:
        node_encoding: How child digests are joined before hashing
        max_leaves: Largest leaf list accepted by one service call
        api_host: Host the REST API binds to
        api_port: Port the REST API binds to
        log_level: Root log level name
        cors_origins: Origins allowed by the CORS middleware
    """
    node_encoding: NodeEncoding = DEFAULT_NODE_ENCODING
    max_leaves: int = DEFAULT_MAX_LEAVES
    api_host: str = "127.0.0.1"
    api_port: int = 8000
    log_level: str = "INFO"
    cors_origins: Tuple[str, ...] = ("*",)

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Build settings from MERKLE_* environment variables.

        Raises:
            ValueError: If a variable holds a value that cannot be used
        """
        encoding = os.getenv("MERKLE_NODE_ENCODING", DEFAULT_NODE_ENCODING.value).strip().lower()
        try:
            node_encoding = NodeEncoding(encoding)
        except ValueError:
            raise ValueError(
                f"MERKLE_NODE_ENCODING must be one of "
                f"{', '.join(e.value for e in NodeEncoding)}, got {encoding!r}"
            )

        max_leaves = _int_from_env("MERKLE_MAX_LEAVES", DEFAULT_MAX_LEAVES)
        if max_leaves < 1:
            raise ValueError(f"MERKLE_MAX_LEAVES must be at least 1, got {max_leaves}")

        api_port = _int_from_env("MERKLE_API_PORT", 8000)
        if not 0 < api_port < 65536:
            raise ValueError(f"MERKLE_API_PORT must be a valid TCP port, got {api_port}")

        log_level = os.getenv("MERKLE_LOG_LEVEL", "INFO").strip().upper()
        if log_level not in _LOG_LEVELS:
            raise ValueError(f"MERKLE_LOG_LEVEL must be one of {', '.join(_LOG_LEVELS)}, got {log_level!r}")

        origins = os.getenv("MERKLE_CORS_ORIGINS", "*")
        cors_origins = tuple(o.strip() for o in origins.split(",") if o.strip()) or ("*",)

        return cls(
            node_encoding=node_encoding,
            max_leaves=max_leaves,
            api_host=os.getenv("MERKLE_API_HOST", "127.0.0.1"),
            api_port=api_port,
            log_level=log_level,
            cors_origins=cors_origins,
        )


def _int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Return the process-wide settings, reading the environment once."""
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
        logger.debug(f"Loaded settings: {_settings}")
    return _settings


def reset_settings() -> None:
    """Forget cached settings so the next get_settings() re-reads the environment."""
    global _settings
    _settings = None
