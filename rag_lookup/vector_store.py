"""
Vector Store Module

WHAT IS A VECTOR INDEX:
A container of (text, embedding) pairs that we search by meaning
similarity instead of keywords.

HOW WE SEARCH (Brute Force, Exact):
1. Compare the query to every stored vector with cosine similarity
2. Sort by similarity (highest first)
3. Return the top K

TIME COMPLEXITY: O(n log n) per query (score all, then sort).
This is the right trade-off for a few hundred fragments from one document.
heapq.nlargest would make it O(n log k) with the same output whenever
scores are distinct; we don't need it at this scale.

RANKING RULES:
- Ties keep insertion order: the fragment added first wins.
- A non-finite score (nan from a zero vector, or inf/nan from bad input)
  ranks below every finite score. Those fragments are still returned if k
  is large enough, after all finite ones, in insertion order.
- Retrieval never changes what is stored.
"""

import math
from dataclasses import dataclass
from typing import Iterator, List, Sequence, Tuple

from rag_lookup.embeddings import cosine_similarity


@dataclass(frozen=True)
class Fragment:
    """
    A piece of text with its embedding.

    WHY FROZEN:
    - Once added to the index a fragment is never edited
    - Embedding stored as a tuple so it can't be mutated from outside
    """
    text: str
    embedding: Tuple[float, ...]

    def __post_init__(self):
        object.__setattr__(self, "embedding", tuple(self.embedding))

    def __repr__(self):
        preview = self.text[:50] + "..." if len(self.text) > 50 else self.text
        return f"Fragment(dim={len(self.embedding)}, text='{preview}')"


@dataclass
class ScoredFragment:
    """
    A single search result.

    WHY SEPARATE FROM Fragment:
    - The score only means something for one query
    """
    fragment: Fragment
    score: float

    def __repr__(self):
        preview = self.fragment.text[:50] + "..." if len(self.fragment.text) > 50 else self.fragment.text
        return f"ScoredFragment(score={self.score:.4f}, text='{preview}')"


def _rank_key(item: Tuple[int, ScoredFragment]):
    position, scored = item
    if math.isfinite(scored.score):
        return (0, -scored.score, position)
    return (1, 0.0, position)


class VectorIndex:
    """
    Simple in-memory vector index.

    LIMITATIONS:
    - Data lost when program ends
    - Linear search - slow for large datasets
    - Not thread-safe: callers sharing one index across threads must
      serialise add() against search()
    """

    def __init__(self):
        """Initialize empty index."""
        self._fragments: List[Fragment] = []

    def add(self, fragment: Fragment) -> None:
        """Append a fragment. No validation is done on the embedding."""
        self._fragments.append(fragment)

    def search(self, query_embedding: Sequence[float], k: int) -> List[ScoredFragment]:
        """
        Find the k fragments most similar to the query.

        Args:
            query_embedding: The query vector (may be empty)
            k: Number of results; k <= 0 returns nothing

        Returns:
            List of ScoredFragment, best first
        """
        if k <= 0 or not self._fragments:
            return []

        scored = [
            (position, ScoredFragment(
                fragment=fragment,
                score=cosine_similarity(query_embedding, fragment.embedding)
            ))
            for position, fragment in enumerate(self._fragments)
        ]
        scored.sort(key=_rank_key)

        return [item for _, item in scored[:k]]

    def retrieve_top_k(self, query_embedding: Sequence[float], k: int) -> List[Fragment]:
        """Same as search(), without the scores."""
        return [result.fragment for result in self.search(query_embedding, k)]

    @property
    def fragments(self) -> Tuple[Fragment, ...]:
        """Stored fragments in insertion order."""
        return tuple(self._fragments)

    def clear(self):
        """Remove all fragments."""
        self._fragments = []

    def __len__(self):
        return len(self._fragments)

    def __iter__(self) -> Iterator[Fragment]:
        return iter(self.fragments)
