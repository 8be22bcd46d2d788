"""
Configuration settings for the Fragment RAG system.

WHY THIS FILE EXISTS:
- Centralizes all configuration in one place
- Makes it easy to switch between environments (dev/prod)
- Keeps secrets separate from code (loaded from .env)

ENVIRONMENT VARIABLES:
- OPENAI_API_KEY (required): API key for embeddings and chat
- OPENAI_CHAT_MODEL: Answer model (default gpt-4o)
- OPENAI_EMBEDDING_MODEL: Embedding model (default text-embedding-ada-002)
- AZURE_OPENAI_ENDPOINT / AZURE_OPENAI_API_VERSION: Use Azure instead
  (model names are then deployment names)
- RAG_CHUNK_SIZE: Max characters per fragment (default 300)
- RAG_TOP_K: Fragments sent to the LLM (default 3)
- RAG_CAESAR_SHIFT: Caesar shift to undo on PDF text (default 0 = off)
- RAG_LOG_LEVEL: Logging level name (default INFO)
"""

import logging
import os
import sys
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass
class OpenAIConfig:
    """
    Configuration for the OpenAI services.

    WHY DATACLASS:
    - Clean way to group related settings
    - Easy to pass around as a single object
    """
    api_key: str
    chat_model: str = "gpt-4o"
    embedding_model: str = "text-embedding-ada-002"
    azure_endpoint: Optional[str] = None
    api_version: str = "2024-02-15-preview"


@dataclass
class ChunkingConfig:
    """
    Configuration for document chunking.

    WHY 300:
    - ~50 words: small enough that each fragment is about one idea
    - Short stories chunk into a few dozen fragments, cheap to embed
    """
    max_len: int = 300


@dataclass
class RetrievalConfig:
    """Configuration for document retrieval."""
    top_k: int = 3


@dataclass
class LoaderConfig:
    """Configuration for document loading."""
    caesar_shift: int = 0


@dataclass
class Settings:
    """
    Main settings container.

    WHY NESTED CONFIGS:
    - Organized by domain (OpenAI, chunking, retrieval, loading)
    - Clear what settings belong together
    """
    openai: OpenAIConfig
    chunking: ChunkingConfig = field(default_factory=ChunkingConfig)
    retrieval: RetrievalConfig = field(default_factory=RetrievalConfig)
    loader: LoaderConfig = field(default_factory=LoaderConfig)
    log_level: str = "INFO"


def _int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def _log_level_from_env() -> str:
    raw = os.getenv("RAG_LOG_LEVEL", "INFO")
    level = raw.strip().upper() or "INFO"
    # getLevelName maps known names to their number and anything else to a string
    if not isinstance(logging.getLevelName(level), int):
        raise ValueError(f"RAG_LOG_LEVEL must be a logging level name, got {raw!r}")
    return level


def load_settings() -> Settings:
    """
    Load settings from environment variables.

    Raises:
        ValueError: If OPENAI_API_KEY is missing or a numeric variable
            is not an integer, or RAG_LOG_LEVEL is not a level name
    """
    api_key = os.getenv("OPENAI_API_KEY")

    if not api_key:
        raise ValueError(
            "OPENAI_API_KEY not set. "
            "Add it to your .env file or set it as an environment variable."
        )

    return Settings(
        openai=OpenAIConfig(
            api_key=api_key,
            chat_model=os.getenv("OPENAI_CHAT_MODEL", "gpt-4o"),
            embedding_model=os.getenv("OPENAI_EMBEDDING_MODEL", "text-embedding-ada-002"),
            azure_endpoint=os.getenv("AZURE_OPENAI_ENDPOINT") or None,
            api_version=os.getenv("AZURE_OPENAI_API_VERSION", "2024-02-15-preview"),
        ),
        chunking=ChunkingConfig(max_len=_int_from_env("RAG_CHUNK_SIZE", 300)),
        retrieval=RetrievalConfig(top_k=_int_from_env("RAG_TOP_K", 3)),
        loader=LoaderConfig(caesar_shift=_int_from_env("RAG_CAESAR_SHIFT", 0)),
        log_level=_log_level_from_env(),
    )


# Singleton pattern - load settings once and reuse
_settings = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def reset_settings() -> None:
    """Forget the cached settings (tests, or after changing the environment)."""
    global _settings
    _settings = None


def configure_logging(level=None) -> None:
    """
    Send rag_lookup log records to stdout.

    Args:
        level: Level name or number; defaults to RAG_LOG_LEVEL or INFO
    """
    if level is None:
        level = os.getenv("RAG_LOG_LEVEL", "INFO").upper()

    package_logger = logging.getLogger("rag_lookup")
    package_logger.setLevel(level)

    # Only add handler if none exist (avoid duplicate handlers)
    if not package_logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        package_logger.addHandler(handler)
