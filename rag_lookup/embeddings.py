"""
Embeddings Module

WHAT ARE EMBEDDINGS:
Embeddings convert text into vectors (lists of numbers) that capture meaning.
Similar texts have similar vectors, allowing us to find related content
using mathematical distance calculations instead of keyword matching.

EXAMPLE:
"What is the story about?"   →  [0.023, -0.041, 0.089, ..., 0.012]
"Summarise the plot"          →  [0.025, -0.038, 0.091, ..., 0.010]
                                  ↑ Very similar vectors

COSINE SIMILARITY RULES IN THIS PROJECT:
- Vectors of different length are compared over the shorter length.
  Nothing is raised; the extra tail of the longer vector is ignored.
- If either vector has zero magnitude (including an empty vector) the
  similarity is undefined and we return NaN instead of a made-up 0.0.
- NaN or infinite inputs flow through to a non-finite score.
The vector index decides how to rank non-finite scores (always last).
"""

import logging
from typing import List, Optional, Sequence
from dataclasses import dataclass
import numpy as np
from openai import AzureOpenAI, OpenAI

from config.settings import get_settings

logger = logging.getLogger(__name__)


@dataclass
class EmbeddingResult:
    """
    Result of embedding a piece of text.

    WHY DATACLASS:
    - Clean container for embedding + metadata
    - Type hints help catch errors
    """
    text: str
    embedding: List[float]
    model: str
    token_count: int

    @property
    def dimension(self) -> int:
        """Get the embedding dimension (1536 for ada-002)."""
        return len(self.embedding)

    def to_numpy(self) -> np.ndarray:
        """Convert to numpy array for math operations."""
        return np.array(self.embedding)


def create_openai_client(api_key: Optional[str] = None):
    """
    Build the OpenAI SDK client from settings.

    WHY TWO CLIENT TYPES:
    - OpenAI: plain api.openai.com with just an API key
    - AzureOpenAI: used when AZURE_OPENAI_ENDPOINT is configured
    """
    settings = get_settings()
    config = settings.openai

    if config.azure_endpoint:
        return AzureOpenAI(
            azure_endpoint=config.azure_endpoint,
            api_key=api_key or config.api_key,
            api_version=config.api_version
        )
    return OpenAI(api_key=api_key or config.api_key)


class EmbeddingClient:
    """
    Client for generating embeddings through the OpenAI API.

    WHY A CLASS:
    - Manages the client connection
    - Handles batching (more efficient than one-at-a-time)
    - Easy to mock for testing: pass client=Mock()
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        client=None
    ):
        """
        Initialize the embedding client.

        Args:
            api_key: API key (defaults to settings)
            model: Embedding model or Azure deployment name (defaults to settings)
            client: Pre-built SDK client; together with model, settings are
                not read at all
        """
        if client is not None and model is not None:
            self.client = client
            self.model = model
            return

        settings = get_settings()
        self.model = model or settings.openai.embedding_model
        self.client = client or create_openai_client(api_key)

    def embed(self, text: str) -> EmbeddingResult:
        """
        Generate embedding for a single text.

        Args:
            text: The text to embed

        Returns:
            EmbeddingResult with the embedding vector
        """
        response = self.client.embeddings.create(
            input=[text],
            model=self.model
        )

        return EmbeddingResult(
            text=text,
            embedding=response.data[0].embedding,
            model=self.model,
            token_count=response.usage.total_tokens
        )

    def embed_batch(
        self,
        texts: List[str],
        batch_size: int = 16
    ) -> List[EmbeddingResult]:
        """
        Generate embeddings for multiple texts.

        Args:
            texts: List of texts to embed
            batch_size: How many to send per request

        Returns:
            List of EmbeddingResult objects, same order as texts
        """
        results = []

        for i in range(0, len(texts), batch_size):
            batch = texts[i:i + batch_size]

            response = self.client.embeddings.create(
                input=batch,
                model=self.model
            )
            logger.debug(f"Embedded batch {i // batch_size + 1} ({len(batch)} texts)")

            # The API may return items out of order; each carries its index
            for embedding_data in sorted(response.data, key=lambda d: d.index):
                results.append(EmbeddingResult(
                    text=batch[embedding_data.index],
                    embedding=embedding_data.embedding,
                    model=self.model,
                    token_count=response.usage.total_tokens // len(batch)  # Approximate
                ))

        return results


def cosine_similarity(vec1: Sequence[float], vec2: Sequence[float]) -> float:
    """
    Calculate cosine similarity between two vectors.

    FORMULA:
    cosine_similarity = (A · B) / (||A|| * ||B||)

    Only the first min(len(A), len(B)) elements are paired.

    EXAMPLE:
    A = [1, 0]      B = [1, 0]      similarity = 1.0
    A = [1, 0]      B = [0, 1]      similarity = 0.0
    A = [1, 0]      B = [0.5, 0.5]  similarity ≈ 0.707
    A = [0, 0]      B = [1, 0]      similarity = nan
    """
    n = min(len(vec1), len(vec2))
    if n == 0:
        return float("nan")

    a = np.asarray(vec1[:n], dtype=float)
    b = np.asarray(vec2[:n], dtype=float)

    with np.errstate(invalid="ignore", over="ignore"):
        scale_a = np.max(np.abs(a))
        scale_b = np.max(np.abs(b))

        if scale_a == 0 or scale_b == 0:
            return float("nan")

        # Cosine ignores magnitude, so rescale to keep the squares in range
        # (1e200 would overflow, 1e-200 would underflow to a zero norm)
        if np.isfinite(scale_a):
            a = a / scale_a
        if np.isfinite(scale_b):
            b = b / scale_b

        magnitude_a = np.linalg.norm(a)
        magnitude_b = np.linalg.norm(b)

        return float(np.dot(a, b) / (magnitude_a * magnitude_b))
